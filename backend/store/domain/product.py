"""
Product Domain Model

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class Product(BaseModel):
    """
    Product domain model

    Fields:
        id: Internal product ID (None until saved)
        description: Product description, title-cased by the service
    """

    id: Optional[int] = Field(None, description="Internal product ID")
    description: str = Field(..., description="Product description")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_persisted(self) -> bool:
        """Whether the product has been saved"""
        return self.id is not None

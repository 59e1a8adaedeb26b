"""
Customer Domain Model

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class Customer(BaseModel):
    """
    Customer domain model

    Fields:
        id: Internal customer ID (None until saved)
        name: Display name, title-cased by the service

    The customer's orders are not held here: they are owned by Order and
    read through OrderRepository.find_by_customer_id.
    """

    id: Optional[int] = Field(None, description="Internal customer ID")
    name: str = Field(..., description="Customer name")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_persisted(self) -> bool:
        """Whether the customer has been saved"""
        return self.id is not None

"""
Order Domain Model

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List

from store.domain.customer import Customer
from store.domain.product import Product


class Order(BaseModel):
    """
    Order domain model - owning side of the customer and product links

    Fields:
        id: Internal order ID (None until saved)
        description: Free text, no format rules
        customer: The customer placing the order (required)
        products: Products in the order, treated as a set by id
    """

    id: Optional[int] = Field(None, description="Internal order ID")
    description: Optional[str] = Field(None, description="Order description")
    customer: Customer = Field(..., description="Customer placing the order")
    products: List[Product] = Field(default_factory=list, description="Products in the order")

    model_config = ConfigDict(from_attributes=True)

    @field_validator('products')
    @classmethod
    def _unique_products(cls, products: List[Product]) -> List[Product]:
        """Drop repeated product ids, keeping the first occurrence"""
        seen = set()
        unique = []
        for product in products:
            key = product.id if product.id is not None else id(product)
            if key in seen:
                continue
            seen.add(key)
            unique.append(product)
        return unique

    @property
    def customer_id(self) -> Optional[int]:
        return self.customer.id

    @property
    def product_ids(self) -> List[int]:
        return [product.id for product in self.products if product.id is not None]

    def to_dict(self) -> dict:
        """
        Flat representation with relationship ids instead of nested models
        """
        return {
            'id': self.id,
            'description': self.description,
            'customer_id': self.customer_id,
            'product_ids': self.product_ids,
        }

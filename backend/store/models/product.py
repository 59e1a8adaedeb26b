"""
Product table
"""
from sqlalchemy import Column, Integer, String

from store.core.database import Base


class Product(Base):
    """
    Catalog products
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(500), nullable=False, index=True)

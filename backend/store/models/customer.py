"""
Customer table
"""
from sqlalchemy import Column, Integer, String

from store.core.database import Base


class Customer(Base):
    """
    Customers placing orders

    Orders own the relationship; deleting a customer that still has
    orders is rejected by the foreign key.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

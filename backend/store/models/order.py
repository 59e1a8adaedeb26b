"""
Order tables
"""
from sqlalchemy import Column, Integer, Text, ForeignKey, Table

from store.core.database import Base


# Join table: orders own the product set
order_products = Table(
    "order_products",
    Base.metadata,
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Order(Base):
    """
    Customer orders (owning side of both relationships)
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
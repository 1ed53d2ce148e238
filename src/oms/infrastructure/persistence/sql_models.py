"""SQLAlchemy ORM models for the order tables.

Layout: ``orders`` 1-N ``order_items`` and ``orders`` 1-N ``order_receipts``.
Money columns keep six decimal places so sub-cent catalog prices survive
unchanged.
Receipts carry no uniqueness constraint, so a redelivered payment event
stores a second receipt.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import declarative_base, relationship

# Base class for declarative ORM models.
Base = declarative_base()


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    total_amount = Column(Numeric(18, 6), nullable=False)
    total_items = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, index=True)
    paid = Column(Boolean, nullable=False, default=False)
    payment_reference = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    items = relationship(
        "OrderItemRow", cascade="all, delete-orphan", lazy="selectin",
        order_by="OrderItemRow.id",
    )
    receipts = relationship(
        "OrderReceiptRow", cascade="all, delete-orphan", lazy="selectin",
        order_by="OrderReceiptRow.id",
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String, nullable=False)  # catalog id, not a local foreign key
    price = Column(Numeric(18, 6), nullable=False)
    quantity = Column(Integer, nullable=False)


class OrderReceiptRow(Base):
    __tablename__ = "order_receipts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    receipt_url = Column(String, nullable=False)

"""SQLAlchemy-backed implementation of OrderRepository.

Each public method opens its own session and commits (or rolls back) a
single transaction before returning.  Concurrent updates of the same
order row are last-write-wins; nothing here locks across calls.
"""

from __future__ import annotations

import logging
from datetime import timezone
from decimal import Decimal

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from oms.domain.exceptions import EntityNotFoundError
from oms.domain.model.order import Order, OrderLineItem, OrderStatus, Receipt
from oms.domain.model.value_objects import Money, Quantity
from oms.domain.repository.order_repository import OrderRepository
from oms.infrastructure.persistence.sql_models import (
    Base,
    OrderItemRow,
    OrderReceiptRow,
    OrderRow,
)

logger = logging.getLogger(__name__)


def _create_engine(database_url: str):
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url
        self._engine = None
        self._session_factory = None

    def connect(self) -> None:
        self._engine = _create_engine(self._database_url)
        # Create database tables on startup if they don't exist.
        Base.metadata.create_all(bind=self._engine)
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        logger.info("Order database connected")

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        row = OrderRow(
            id=order.id,
            total_amount=order.total_amount.amount,
            total_items=order.total_items,
            status=order.status.value,
            paid=order.paid,
            payment_reference=order.payment_reference,
            created_at=order.created_at,
            items=[
                OrderItemRow(
                    product_id=item.product_id,
                    price=item.price.amount,
                    quantity=item.quantity.value,
                )
                for item in order.items
            ],
        )
        with self._begin() as session:
            session.add(row)

    def get_by_id(self, order_id: str) -> Order | None:
        with self._begin() as session:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None

    def list_page(
        self, page: int, limit: int, status: OrderStatus | None = None
    ) -> list[Order]:
        stmt = select(OrderRow).order_by(OrderRow.created_at, OrderRow.id)
        if status is not None:
            stmt = stmt.where(OrderRow.status == status.value)
        stmt = stmt.offset((page - 1) * limit).limit(limit)
        with self._begin() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def count(self, status: OrderStatus | None = None) -> int:
        stmt = select(func.count()).select_from(OrderRow)
        if status is not None:
            stmt = stmt.where(OrderRow.status == status.value)
        with self._begin() as session:
            return session.scalar(stmt)

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        with self._begin() as session:
            row = self._get_row(session, order_id)
            row.status = status.value
            session.flush()
            return self._to_domain(row)

    def record_payment(
        self, order_id: str, payment_reference: str, receipt_url: str
    ) -> Order:
        with self._begin() as session:
            row = self._get_row(session, order_id)
            row.status = OrderStatus.PAID.value
            row.paid = True
            row.payment_reference = payment_reference
            row.receipts.append(OrderReceiptRow(receipt_url=receipt_url))
            session.flush()
            return self._to_domain(row)

    # --- Internal helpers -----------------------------------------------------

    def _begin(self):
        if self._session_factory is None:
            raise RuntimeError("SqlAlchemyOrderRepository.connect() was not called")
        return self._session_factory.begin()

    @staticmethod
    def _get_row(session, order_id: str) -> OrderRow:
        row = session.get(OrderRow, order_id)
        if row is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return row

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        created_at = row.created_at
        if created_at.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Order(
            id=row.id,
            items=[
                OrderLineItem(
                    product_id=item.product_id,
                    quantity=Quantity(item.quantity),
                    price=Money(Decimal(item.price)),
                )
                for item in row.items
            ],
            total_amount=Money(Decimal(row.total_amount)),
            total_items=row.total_items,
            status=OrderStatus(row.status),
            paid=row.paid,
            payment_reference=row.payment_reference,
            created_at=created_at,
            receipts=[
                Receipt(order_id=row.id, receipt_url=receipt.receipt_url)
                for receipt in row.receipts
            ],
        )

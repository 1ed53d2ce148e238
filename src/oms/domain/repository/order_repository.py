"""Abstract store for the Order aggregate.

The store is the only shared mutable resource in the service.  Every
method is one unit of work against it: implementations must apply each
call atomically (all rows or none) and must not hold anything open
between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from oms.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    def connect(self) -> None:
        """Acquire storage resources.  Called once at process start."""

    def close(self) -> None:
        """Release storage resources.  Called once at process shutdown."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Insert a new order together with all of its line items."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order with its items and receipts, or None if not found."""

    @abstractmethod
    def list_page(
        self, page: int, limit: int, status: OrderStatus | None = None
    ) -> list[Order]:
        """Return one page of orders, oldest first (ties broken by id)."""

    @abstractmethod
    def count(self, status: OrderStatus | None = None) -> int:
        """Count orders, optionally restricted to one status."""

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Set the status of an order.  Raises EntityNotFoundError."""

    @abstractmethod
    def record_payment(
        self, order_id: str, payment_reference: str, receipt_url: str
    ) -> Order:
        """Mark an order PAID and attach a receipt in one transaction.

        Raises EntityNotFoundError if the order does not exist.
        """

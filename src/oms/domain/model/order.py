"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and receipts.
Line items are written once at creation and never change afterwards;
receipts are only ever appended by settlement.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from oms.domain.exceptions import ValidationError
from oms.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, raw: str) -> OrderStatus:
        try:
            return cls(raw.upper())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Invalid order status '{raw}' (expected one of {allowed})"
            ) from exc


@dataclass(frozen=True)
class OrderLineItem:
    """A product line with the catalog price captured at order-creation time."""

    product_id: str
    quantity: Quantity
    price: Money  # snapshot, never re-read from the catalog

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass(frozen=True)
class Receipt:
    order_id: str
    receipt_url: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for purchase orders.

    Use the ``Order.create()`` factory for new orders; it assigns the id
    and computes the totals.  The ``__init__`` is intentionally simple so
    stores can reconstitute persisted orders without recomputing anything.
    """

    id: str
    items: list[OrderLineItem]
    total_amount: Money
    total_items: int
    status: OrderStatus = OrderStatus.PENDING
    paid: bool = False
    payment_reference: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    receipts: list[Receipt] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(items: list[OrderLineItem]) -> Order:
        """Create a new PENDING order with totals derived from its items."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        total_amount = Money.zero()
        total_items = 0
        for item in items:
            total_amount = total_amount + item.line_total
            total_items += item.quantity.value

        return Order(
            id=str(uuid.uuid4()),
            items=list(items),
            total_amount=total_amount,
            total_items=total_items,
        )

    # --- Settlement -----------------------------------------------------------

    def record_payment(self, payment_reference: str, receipt_url: str) -> Receipt:
        """Apply a payment-succeeded notification.

        Unconditional: a redelivered notification re-applies the same
        fields and appends another receipt.
        """
        self.status = OrderStatus.PAID
        self.paid = True
        self.payment_reference = payment_reference
        receipt = Receipt(order_id=self.id, receipt_url=receipt_url)
        self.receipts.append(receipt)
        return receipt

    @property
    def product_ids(self) -> list[str]:
        """Distinct product ids in line-item order."""
        return list(dict.fromkeys(item.product_id for item in self.items))

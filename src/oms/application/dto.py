"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the outer adapters (CLI, message dispatcher) and
the application layer without exposing domain internals.  Every read
operation gets its own explicit output type; ``to_dict`` produces the
JSON-ready wire shape.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the caller asked for (product id + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class PaymentSucceeded:
    """Input: the payment service's settlement notification."""

    order_id: str
    payment_reference: str
    receipt_url: str

    @staticmethod
    def from_payload(raw: dict) -> PaymentSucceeded:
        # the payment service names the charge id after its provider
        reference = raw.get("externalPaymentReference") or raw["stripePaymentId"]
        return PaymentSucceeded(
            order_id=raw["orderId"],
            payment_reference=reference,
            receipt_url=raw["receiptUrl"],
        )


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    name: str
    price: Decimal
    quantity: int

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": float(self.price),
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: an order row without line items (listings, status changes)."""

    id: str
    total_amount: Decimal
    total_items: int
    status: str
    paid: bool
    payment_reference: str | None
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "totalAmount": float(self.total_amount),
            "totalItems": self.total_items,
            "status": self.status,
            "paid": self.paid,
            "paymentReference": self.payment_reference,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class OrderDTO:
    """Output: an order with its line items decorated with product names."""

    id: str
    total_amount: Decimal
    total_items: int
    status: str
    paid: bool
    payment_reference: str | None
    created_at: datetime
    items: list[OrderLineItemDTO]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "totalAmount": float(self.total_amount),
            "totalItems": self.total_items,
            "status": self.status,
            "paid": self.paid,
            "paymentReference": self.payment_reference,
            "createdAt": self.created_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class CreatedOrderDTO:
    order: OrderDTO
    payment_session: dict

    def to_dict(self) -> dict:
        return {"order": self.order.to_dict(), "paymentSession": self.payment_session}


@dataclass(frozen=True)
class PageMeta:
    total: int
    page: int
    last_page: int

    @staticmethod
    def compute(total: int, page: int, limit: int) -> PageMeta:
        return PageMeta(total=total, page=page, last_page=math.ceil(total / limit))


@dataclass(frozen=True)
class OrderPageDTO:
    data: list[OrderSummaryDTO]
    meta: PageMeta

    def to_dict(self) -> dict:
        return {
            "data": [order.to_dict() for order in self.data],
            "meta": {
                "total": self.meta.total,
                "page": self.meta.page,
                "lastPage": self.meta.last_page,
            },
        }

"""Port for the remote payment service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from oms.domain.model.value_objects import Money

PAYMENT_CURRENCY = "usd"


@dataclass(frozen=True)
class PaymentLineItem:
    name: str
    price: Money
    quantity: int


@dataclass(frozen=True)
class PaymentSessionRequest:
    order_id: str
    items: list[PaymentLineItem]
    currency: str = PAYMENT_CURRENCY

    def to_payload(self) -> dict:
        return {
            "orderId": self.order_id,
            "currency": self.currency,
            "items": [
                {
                    "name": item.name,
                    "price": float(item.price.amount),
                    "quantity": item.quantity,
                }
                for item in self.items
            ],
        }


class PaymentGateway(ABC):

    @abstractmethod
    def create_payment_session(self, request: PaymentSessionRequest) -> dict:
        """Open a payment session and return the provider's descriptor as-is.

        Raises UpstreamError on any failure or timeout.
        """

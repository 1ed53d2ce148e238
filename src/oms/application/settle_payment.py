"""Application service: settle an order from a payment-succeeded event.

Runs independently of the creation saga and never calls a remote
service.  The store update is applied on every delivery without looking
at the current status first; a redelivered event therefore re-applies
the same fields and adds another receipt row.
"""

from __future__ import annotations

import logging

from oms.application.dto import OrderSummaryDTO, PaymentSucceeded
from oms.application.mapping import to_summary
from oms.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class SettlePaymentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, event: PaymentSucceeded) -> OrderSummaryDTO:
        logger.info(
            "Payment succeeded for order %s (reference %s)",
            event.order_id, event.payment_reference,
        )
        order = self._order_repo.record_payment(
            event.order_id,
            payment_reference=event.payment_reference,
            receipt_url=event.receipt_url,
        )
        logger.debug("Order %s now has %d receipt(s)", order.id, len(order.receipts))
        return to_summary(order)

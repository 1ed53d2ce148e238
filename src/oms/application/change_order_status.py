"""Application service: explicit (operator-driven) status change.

Reads the current order first and only writes when the status actually
changes, so repeating the same request is harmless.
"""

from __future__ import annotations

import logging

from oms.application.dto import OrderSummaryDTO
from oms.application.mapping import to_summary
from oms.domain.exceptions import EntityNotFoundError
from oms.domain.model.order import OrderStatus
from oms.domain.repository.order_repository import OrderRepository
from oms.domain.service.status_machine import StatusMachine

logger = logging.getLogger(__name__)


class ChangeOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        status_machine: StatusMachine | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._status_machine = status_machine or StatusMachine()

    def handle(self, order_id: str, status: OrderStatus) -> OrderSummaryDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        result = self._status_machine.transition(order.status, status)
        if not result.changed:
            return to_summary(order)

        updated = self._order_repo.update_status(order_id, result.status)
        logger.info(
            "Order %s status changed %s -> %s",
            order_id, order.status.value, updated.status.value,
        )
        return to_summary(updated)

"""Maps inbound message patterns to the order use cases.

Request/reply patterns return a JSON-ready dict: the result on success,
``{"error": {"status": ..., "message": ...}}`` on a domain failure.
Event patterns return nothing.  Infrastructure errors (store down, bugs)
are not caught here; they propagate to the transport, which decides
about redelivery.

Only the event half has a transport in this package
(``PaymentEventConsumer``).  ``request()`` is the entry point for a
request/reply server on the same broker; no such server ships here, the
CLI calls the handlers directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from oms.application.change_order_status import ChangeOrderStatusHandler
from oms.application.create_order import CreateOrderHandler
from oms.application.dto import OrderItemSpec, PaymentSucceeded
from oms.application.list_orders import ListOrdersHandler
from oms.application.settle_payment import SettlePaymentHandler
from oms.application.show_order import ShowOrderHandler
from oms.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from oms.domain.model.order import OrderStatus

logger = logging.getLogger(__name__)

CREATE_ORDER = "createOrder"
FIND_ALL_ORDERS = "findAllOrders"
FIND_ONE_ORDER = "findOneOrder"
CHANGE_ORDER_STATUS = "changeOrderStatus"
PAYMENT_SUCCEEDED = "payment.succeeded"


class OrderMessageDispatcher:

    def __init__(
        self,
        create_order: CreateOrderHandler,
        list_orders: ListOrdersHandler,
        show_order: ShowOrderHandler,
        change_status: ChangeOrderStatusHandler,
        settle_payment: SettlePaymentHandler,
    ) -> None:
        self._create_order = create_order
        self._list_orders = list_orders
        self._show_order = show_order
        self._change_status = change_status
        self._settle_payment = settle_payment
        self._requests: dict[str, Callable[[dict], dict]] = {
            CREATE_ORDER: self._on_create_order,
            FIND_ALL_ORDERS: self._on_find_all,
            FIND_ONE_ORDER: self._on_find_one,
            CHANGE_ORDER_STATUS: self._on_change_status,
        }

    # --- Request/reply --------------------------------------------------------

    def request(self, pattern: str, payload: dict) -> dict:
        handler = self._requests.get(pattern)
        try:
            if handler is None:
                raise ValidationError(f"Unknown message pattern '{pattern}'")
            return handler(payload)
        except DomainException as exc:
            logger.info("%s failed: %s", pattern, exc)
            return {"error": exc.to_dict()}

    def _on_create_order(self, payload: dict) -> dict:
        specs = [
            OrderItemSpec(
                product_id=str(_field(raw, "productId")),
                quantity=_field(raw, "quantity"),
            )
            for raw in _field(payload, "items")
        ]
        return self._create_order.handle(specs).to_dict()

    def _on_find_all(self, payload: dict) -> dict:
        status = payload.get("status")
        return self._list_orders.handle(
            page=_int_field(payload, "page", 1),
            limit=_int_field(payload, "limit", 10),
            status=OrderStatus.parse(status) if status else None,
        ).to_dict()

    def _on_find_one(self, payload: dict) -> dict:
        return self._show_order.handle(_field(payload, "id")).to_dict()

    def _on_change_status(self, payload: dict) -> dict:
        status = OrderStatus.parse(_field(payload, "status"))
        return self._change_status.handle(_field(payload, "id"), status).to_dict()

    # --- Events ---------------------------------------------------------------

    def event(self, pattern: str, payload: dict) -> None:
        if pattern != PAYMENT_SUCCEEDED:
            logger.warning("Ignoring unexpected event '%s'", pattern)
            return

        try:
            event = PaymentSucceeded.from_payload(payload)
        except KeyError as exc:
            logger.warning("Dropping malformed %s event %r: missing %s", pattern, payload, exc)
            return

        try:
            self._settle_payment.handle(event)
        except EntityNotFoundError:
            # payment sessions are only opened after the order commits, so an
            # unknown id cannot be a race with creation; redelivery won't help
            logger.warning("Dropping %s for unknown order %s", pattern, event.order_id)


def _field(payload: dict, name: str):
    try:
        return payload[name]
    except KeyError:
        raise ValidationError(f"Missing field '{name}'") from None


def _int_field(payload: dict, name: str, default: int) -> int:
    raw = payload.get(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{name}' must be an integer, got {raw!r}") from None

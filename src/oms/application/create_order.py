"""Application service: Create Order use case (the creation saga).

Sequence: product catalog -> totals -> one atomic store write -> read
back -> payment gateway.  Remote calls happen strictly before or after
the store write, never during it.

Failure semantics:
- catalog errors: nothing has been written, the error goes to the caller
  unchanged (UnknownProductsError or UpstreamError);
- store errors: the write is atomic, nothing is half-written;
- payment gateway errors: the order is already committed and stays
  PENDING without a session.  This is logged and raised as
  PaymentSessionError carrying the order id.  The order is not rolled back.
"""

from __future__ import annotations

import logging

from oms.application.dto import CreatedOrderDTO, OrderDTO, OrderItemSpec
from oms.application.mapping import to_detail
from oms.domain.exceptions import (
    EntityNotFoundError,
    PaymentSessionError,
    UnknownProductsError,
    UpstreamError,
    ValidationError,
)
from oms.domain.gateway.payment_gateway import (
    PaymentGateway,
    PaymentLineItem,
    PaymentSessionRequest,
)
from oms.domain.gateway.product_catalog import ProductCatalog
from oms.domain.model.order import Order, OrderLineItem
from oms.domain.model.product import ProductInfo, index_by_id
from oms.domain.model.value_objects import Money, Quantity
from oms.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: ProductCatalog,
        payments: PaymentGateway,
    ) -> None:
        self._order_repo = order_repo
        self._catalog = catalog
        self._payments = payments

    def handle(self, item_specs: list[OrderItemSpec]) -> CreatedOrderDTO:
        if not item_specs:
            raise ValidationError("Order must contain at least one item")

        products = self._fetch_products(item_specs)

        # Prices come from the catalog reply only, never from the caller.
        order = Order.create(
            [
                OrderLineItem(
                    product_id=spec.product_id,
                    quantity=Quantity(spec.quantity),
                    price=products[spec.product_id].price,
                )
                for spec in item_specs
            ]
        )
        self._order_repo.add(order)
        logger.info(
            "Order %s created: %d item(s), total %s",
            order.id, order.total_items, order.total_amount,
        )

        stored = self._order_repo.get_by_id(order.id)
        if stored is None:
            raise EntityNotFoundError(f"Order {order.id} not found after commit")
        dto = to_detail(stored, products)

        payment_session = self._open_payment_session(dto)
        return CreatedOrderDTO(order=dto, payment_session=payment_session)

    # --- Steps ----------------------------------------------------------------

    def _fetch_products(self, item_specs: list[OrderItemSpec]) -> dict[str, ProductInfo]:
        """One catalog round trip for the distinct ids of the request."""
        ids = list(dict.fromkeys(spec.product_id for spec in item_specs))
        products = index_by_id(self._catalog.validate_products(ids))

        # a catalog that silently drops ids is treated like one that names them
        missing = [pid for pid in ids if pid not in products]
        if missing:
            raise UnknownProductsError(missing)
        return products

    def _open_payment_session(self, order: OrderDTO) -> dict:
        request = PaymentSessionRequest(
            order_id=order.id,
            items=[
                PaymentLineItem(
                    name=item.name,
                    price=Money(item.price),
                    quantity=item.quantity,
                )
                for item in order.items
            ],
        )
        try:
            return self._payments.create_payment_session(request)
        except UpstreamError as exc:
            logger.error(
                "Order %s committed as PENDING without a payment session: %s",
                order.id, exc,
            )
            raise PaymentSessionError(order.id, str(exc)) from exc

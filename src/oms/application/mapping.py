"""Domain -> DTO mapping shared by the order use cases."""

from __future__ import annotations

from oms.application.dto import OrderDTO, OrderLineItemDTO, OrderSummaryDTO
from oms.domain.exceptions import UnknownProductsError
from oms.domain.model.order import Order
from oms.domain.model.product import ProductInfo


def to_summary(order: Order) -> OrderSummaryDTO:
    return OrderSummaryDTO(
        id=order.id,
        total_amount=order.total_amount.amount,
        total_items=order.total_items,
        status=order.status.value,
        paid=order.paid,
        payment_reference=order.payment_reference,
        created_at=order.created_at,
    )


def to_detail(order: Order, products: dict[str, ProductInfo]) -> OrderDTO:
    """Decorate each line item with the product name from *products*."""
    missing = [pid for pid in order.product_ids if pid not in products]
    if missing:
        raise UnknownProductsError(missing)

    return OrderDTO(
        id=order.id,
        total_amount=order.total_amount.amount,
        total_items=order.total_items,
        status=order.status.value,
        paid=order.paid,
        payment_reference=order.payment_reference,
        created_at=order.created_at,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=products[item.product_id].name,
                price=item.price.amount,
                quantity=item.quantity.value,
            )
            for item in order.items
        ],
    )

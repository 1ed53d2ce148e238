"""Application service: Show Order use case (query).

Line-item prices are the creation-time snapshot; product names are
looked up live on every read, so a renamed product shows its new name.
"""

from __future__ import annotations

from oms.application.dto import OrderDTO
from oms.application.mapping import to_detail
from oms.domain.exceptions import EntityNotFoundError
from oms.domain.gateway.product_catalog import ProductCatalog
from oms.domain.model.product import index_by_id
from oms.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository, catalog: ProductCatalog) -> None:
        self._order_repo = order_repo
        self._catalog = catalog

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        products = index_by_id(self._catalog.validate_products(order.product_ids))
        return to_detail(order, products)

"""Application service: List Orders use case (query)."""

from __future__ import annotations

from oms.application.dto import OrderPageDTO, PageMeta
from oms.application.mapping import to_summary
from oms.domain.exceptions import ValidationError
from oms.domain.model.order import OrderStatus
from oms.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self, page: int = 1, limit: int = 10, status: OrderStatus | None = None
    ) -> OrderPageDTO:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        total = self._order_repo.count(status)
        orders = self._order_repo.list_page(page, limit, status)
        return OrderPageDTO(
            data=[to_summary(order) for order in orders],
            meta=PageMeta.compute(total=total, page=page, limit=limit),
        )

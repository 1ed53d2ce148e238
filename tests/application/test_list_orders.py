"""Integration tests for the ListOrders query."""

from datetime import datetime, timedelta, timezone

import pytest

from oms.application.list_orders import ListOrdersHandler
from oms.domain.exceptions import ValidationError
from oms.domain.model.order import Order, OrderLineItem, OrderStatus
from oms.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeOrderRepository

_T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _seed(order_repo: FakeOrderRepository, count: int, status=OrderStatus.PENDING) -> list[str]:
    ids = []
    for _ in range(count):
        order = Order.create([OrderLineItem("P1", Quantity(1), Money.of("5"))])
        order.status = status
        order.created_at = _T0 + timedelta(minutes=order_repo.count())
        order_repo.add(order)
        ids.append(order.id)
    return ids


class TestListOrders:

    def test_pagination_meta(self):
        order_repo = FakeOrderRepository()
        _seed(order_repo, 7)

        page = ListOrdersHandler(order_repo).handle(page=2, limit=3)
        assert len(page.data) == 3
        assert (page.meta.total, page.meta.page, page.meta.last_page) == (7, 2, 3)

    def test_oldest_first(self):
        order_repo = FakeOrderRepository()
        ids = _seed(order_repo, 4)

        page = ListOrdersHandler(order_repo).handle(page=1, limit=10)
        assert [o.id for o in page.data] == ids

    def test_same_timestamp_ordered_by_id(self):
        order_repo = FakeOrderRepository()
        ids = []
        for _ in range(3):
            order = Order.create([OrderLineItem("P1", Quantity(1), Money.of("5"))])
            order.created_at = _T0
            order_repo.add(order)
            ids.append(order.id)

        page = ListOrdersHandler(order_repo).handle()
        assert [o.id for o in page.data] == sorted(ids)

    def test_status_filter(self):
        order_repo = FakeOrderRepository()
        _seed(order_repo, 2)
        paid = _seed(order_repo, 3, status=OrderStatus.PAID)

        page = ListOrdersHandler(order_repo).handle(status=OrderStatus.PAID)
        assert [o.id for o in page.data] == paid
        assert page.meta.total == 3
        assert page.meta.last_page == 1

    def test_empty(self):
        page = ListOrdersHandler(FakeOrderRepository()).handle()
        assert page.data == []
        assert (page.meta.total, page.meta.last_page) == (0, 0)

    def test_page_past_the_end(self):
        order_repo = FakeOrderRepository()
        _seed(order_repo, 2)
        page = ListOrdersHandler(order_repo).handle(page=5, limit=10)
        assert page.data == []
        assert page.meta.total == 2

    def test_wire_shape(self):
        order_repo = FakeOrderRepository()
        _seed(order_repo, 1)
        payload = ListOrdersHandler(order_repo).handle(limit=5).to_dict()
        assert payload["meta"] == {"total": 1, "page": 1, "lastPage": 1}
        assert payload["data"][0]["status"] == "PENDING"

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0)])
    def test_invalid_paging_rejected(self, page, limit):
        with pytest.raises(ValidationError):
            ListOrdersHandler(FakeOrderRepository()).handle(page=page, limit=limit)

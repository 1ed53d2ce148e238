"""Integration tests for the ShowOrder query."""

from decimal import Decimal

import pytest

from oms.application.create_order import CreateOrderHandler
from oms.application.dto import OrderItemSpec
from oms.application.show_order import ShowOrderHandler
from oms.domain.exceptions import EntityNotFoundError, UpstreamError
from oms.domain.model.product import ProductInfo
from oms.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakePaymentGateway, FakeProductCatalog


def _setup():
    order_repo = FakeOrderRepository()
    catalog = FakeProductCatalog([
        ProductInfo(id="P1", name="Widget", price=Money.of("10")),
        ProductInfo(id="P2", name="Gadget", price=Money.of("4")),
    ])
    create = CreateOrderHandler(order_repo, catalog, FakePaymentGateway())
    return ShowOrderHandler(order_repo, catalog), create, catalog


class TestShowOrder:

    def test_returns_decorated_items(self):
        show, create, _ = _setup()
        created = create.handle([OrderItemSpec("P1", 2), OrderItemSpec("P2", 1)])

        dto = show.handle(created.order.id)
        assert dto.id == created.order.id
        assert dto.total_amount == Decimal("24")
        assert [(i.name, i.quantity) for i in dto.items] == [("Widget", 2), ("Gadget", 1)]

    def test_names_are_live_prices_are_snapshots(self):
        show, create, catalog = _setup()
        created = create.handle([OrderItemSpec("P1", 2)])

        catalog.put(ProductInfo(id="P1", name="Widget Pro", price=Money.of("12")))

        [item] = show.handle(created.order.id).items
        assert item.name == "Widget Pro"
        assert item.price == Decimal("10")

    def test_one_catalog_call_with_distinct_ids(self):
        show, create, catalog = _setup()
        created = create.handle([OrderItemSpec("P1", 1), OrderItemSpec("P1", 1)])
        catalog.calls.clear()

        show.handle(created.order.id)
        assert catalog.calls == [["P1"]]

    def test_wire_shape_has_single_items_collection(self):
        show, create, _ = _setup()
        created = create.handle([OrderItemSpec("P1", 1)])

        payload = show.handle(created.order.id).to_dict()
        assert payload["items"] == [
            {"productId": "P1", "name": "Widget", "price": 10.0, "quantity": 1}
        ]
        assert set(payload) == {
            "id", "totalAmount", "totalItems", "status", "paid",
            "paymentReference", "createdAt", "items",
        }

    def test_not_found(self):
        show, _, catalog = _setup()
        with pytest.raises(EntityNotFoundError):
            show.handle("nope")
        assert catalog.calls == []

    def test_catalog_outage(self):
        show, create, catalog = _setup()
        created = create.handle([OrderItemSpec("P1", 1)])
        catalog.unavailable = True
        with pytest.raises(UpstreamError):
            show.handle(created.order.id)

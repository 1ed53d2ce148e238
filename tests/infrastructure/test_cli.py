"""Smoke tests for the click CLI against a JSON store and fake remotes."""

import pytest
from click.testing import CliRunner

from oms.domain.model.product import ProductInfo
from oms.domain.model.value_objects import Money
from oms.infrastructure import bootstrap
from oms.infrastructure.cli.main import cli
from oms.infrastructure.persistence.json_order_repository import JsonOrderRepository
from tests.fakes import FakePaymentGateway, FakeProductCatalog


@pytest.fixture
def env(tmp_path, monkeypatch):
    catalog = FakeProductCatalog([ProductInfo(id="P1", name="Widget", price=Money.of("10"))])
    payments = FakePaymentGateway()
    monkeypatch.setenv("OMS_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("OMS_DATABASE_URL", raising=False)
    monkeypatch.setattr(bootstrap, "product_catalog", lambda settings: catalog)
    monkeypatch.setattr(bootstrap, "payment_gateway", lambda settings: payments)
    return tmp_path, catalog, payments


def _only_order_id(data_dir) -> str:
    store = JsonOrderRepository(data_dir / "orders.json")
    [order] = store.list_page(1, 10)
    return order.id


class TestOrderCommands:

    def test_create_show_pay_list(self, env):
        data_dir, _, _ = env
        runner = CliRunner()

        result = runner.invoke(cli, ["order", "create", "--items", "P1:2"])
        assert result.exit_code == 0, result.output
        assert "status=PENDING" in result.output
        assert "20.00" in result.output

        order_id = _only_order_id(data_dir)
        result = runner.invoke(cli, [
            "order", "paid", "--id", order_id,
            "--reference", "ch_1", "--receipt-url", "https://r/1",
        ])
        assert result.exit_code == 0, result.output
        assert "PAID" in result.output

        result = runner.invoke(cli, ["order", "show", "--id", order_id])
        assert result.exit_code == 0, result.output
        assert "Widget" in result.output
        assert "ch_1" in result.output

        result = runner.invoke(cli, ["order", "list", "--status", "paid"])
        assert result.exit_code == 0, result.output
        assert order_id in result.output
        assert "Page 1 of 1 (1 orders)" in result.output

    def test_status_change(self, env):
        data_dir, _, _ = env
        runner = CliRunner()
        runner.invoke(cli, ["order", "create", "--items", "P1:1"])
        order_id = _only_order_id(data_dir)

        result = runner.invoke(cli, ["order", "status", "--id", order_id, "--status", "DELIVERED"])
        assert result.exit_code == 0, result.output
        assert "DELIVERED" in result.output

    def test_unknown_product_fails(self, env):
        result = CliRunner().invoke(cli, ["order", "create", "--items", "P9:1"])
        assert result.exit_code == 1
        assert "Unknown product(s): P9" in result.output

    def test_payment_failure_names_pending_order(self, env):
        data_dir, _, payments = env
        payments.unavailable = True

        result = CliRunner().invoke(cli, ["order", "create", "--items", "P1:1"])
        assert result.exit_code == 1
        assert f"Order {_only_order_id(data_dir)} is PENDING" in result.output

    def test_bad_item_format(self, env):
        result = CliRunner().invoke(cli, ["order", "create", "--items", "P1"])
        assert result.exit_code == 2
        assert "Expected 'ProductId:Quantity'" in result.output

    def test_show_missing(self, env):
        result = CliRunner().invoke(cli, ["order", "show", "--id", "missing"])
        assert result.exit_code == 1
        assert "not found" in result.output

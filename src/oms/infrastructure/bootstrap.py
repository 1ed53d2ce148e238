"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The store is built
once per process; callers own its connect/close lifecycle.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from oms.application.change_order_status import ChangeOrderStatusHandler
from oms.application.create_order import CreateOrderHandler
from oms.application.list_orders import ListOrdersHandler
from oms.application.settle_payment import SettlePaymentHandler
from oms.application.show_order import ShowOrderHandler
from oms.domain.repository.order_repository import OrderRepository
from oms.infrastructure.clients.http_payment_gateway import HttpPaymentGateway
from oms.infrastructure.clients.http_product_catalog import HttpProductCatalog
from oms.infrastructure.config import Settings
from oms.infrastructure.messaging.dispatcher import OrderMessageDispatcher
from oms.infrastructure.messaging.payment_consumer import PaymentEventConsumer
from oms.infrastructure.persistence.json_order_repository import JsonOrderRepository
from oms.infrastructure.persistence.sqlalchemy_order_repository import (
    SqlAlchemyOrderRepository,
)


def order_repository(settings: Settings) -> OrderRepository:
    if settings.database_url:
        return SqlAlchemyOrderRepository(settings.database_url)
    return JsonOrderRepository(settings.data_dir / "orders.json")


def product_catalog(settings: Settings) -> HttpProductCatalog:
    return HttpProductCatalog(settings.products_url, timeout=settings.remote_timeout)


def payment_gateway(settings: Settings) -> HttpPaymentGateway:
    return HttpPaymentGateway(settings.payments_url, timeout=settings.remote_timeout)


def dispatcher(settings: Settings, order_repo: OrderRepository) -> OrderMessageDispatcher:
    catalog = product_catalog(settings)
    return OrderMessageDispatcher(
        create_order=CreateOrderHandler(order_repo, catalog, payment_gateway(settings)),
        list_orders=ListOrdersHandler(order_repo),
        show_order=ShowOrderHandler(order_repo, catalog),
        change_status=ChangeOrderStatusHandler(order_repo),
        settle_payment=SettlePaymentHandler(order_repo),
    )


def payment_consumer(settings: Settings, order_repo: OrderRepository) -> PaymentEventConsumer:
    return PaymentEventConsumer(
        dispatcher(settings, order_repo),
        host=settings.rabbitmq_host,
        exchange=settings.events_exchange,
    )


@contextmanager
def connected(order_repo: OrderRepository) -> Iterator[OrderRepository]:
    """Scope a store's connect/close to a block (one CLI run, one consumer)."""
    order_repo.connect()
    try:
        yield order_repo
    finally:
        order_repo.close()

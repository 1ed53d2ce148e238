"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from oms.application.change_order_status import ChangeOrderStatusHandler
from oms.application.create_order import CreateOrderHandler
from oms.application.dto import OrderDTO, OrderItemSpec, PaymentSucceeded
from oms.application.list_orders import ListOrdersHandler
from oms.application.settle_payment import SettlePaymentHandler
from oms.application.show_order import ShowOrderHandler
from oms.domain.exceptions import DomainException, PaymentSessionError
from oms.domain.model.order import OrderStatus
from oms.infrastructure import bootstrap
from oms.infrastructure.config import Settings

STATUS_CHOICE = click.Choice([s.value for s in OrderStatus], case_sensitive=False)


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'P1:3,P2:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order {dto.id}  (status={dto.status}, paid={'yes' if dto.paid else 'no'})")
    click.echo(f"Created:  {dto.created_at:%Y-%m-%d %H:%M UTC}")
    if dto.payment_reference:
        click.echo(f"Payment:  {dto.payment_reference}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>5} "
            f"{item.price:>10.2f} {item.price * item.quantity:>10.2f}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total_amount:>20.2f}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.pass_obj
def order_create(settings: Settings, items: str) -> None:
    """Create an order and open its payment session."""
    specs = _parse_items(items)

    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        handler = CreateOrderHandler(
            order_repo=repo,
            catalog=bootstrap.product_catalog(settings),
            payments=bootstrap.payment_gateway(settings),
        )
        try:
            result = handler.handle(specs)
        except PaymentSessionError as exc:
            raise click.ClickException(
                f"{exc}\nOrder {exc.order_id} is PENDING without a payment session."
            )
        except DomainException as exc:
            raise click.ClickException(str(exc))

    _display_order(result.order)
    click.echo()
    click.echo(f"Payment session: {result.payment_session.get('url', result.payment_session)}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(settings: Settings, order_id: str) -> None:
    """Show an order with current product names."""
    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        handler = ShowOrderHandler(repo, bootstrap.product_catalog(settings))
        try:
            dto = handler.handle(order_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--limit", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--status", type=STATUS_CHOICE, default=None, help="Only orders in this status.")
@click.pass_obj
def order_list(settings: Settings, page: int, limit: int, status: str | None) -> None:
    """List orders page by page."""
    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        result = ListOrdersHandler(repo).handle(
            page=page,
            limit=limit,
            status=OrderStatus.parse(status) if status else None,
        )

    if not result.data:
        click.echo("No orders found.")
    else:
        click.echo(f"{'ID':<38} {'Status':<10} {'Items':>6} {'Total':>10}")
        click.echo("-" * 67)
        for o in result.data:
            click.echo(f"{o.id:<38} {o.status:<10} {o.total_items:>6} {o.total_amount:>10.2f}")
    meta = result.meta
    click.echo(f"Page {meta.page} of {meta.last_page} ({meta.total} orders)")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", required=True, type=STATUS_CHOICE, help="New status.")
@click.pass_obj
def order_status(settings: Settings, order_id: str, status: str) -> None:
    """Change the status of an order."""
    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        try:
            dto = ChangeOrderStatusHandler(repo).handle(order_id, OrderStatus.parse(status))
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} is {dto.status}.")


@click.command("paid")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--reference", required=True, help="External payment reference.")
@click.option("--receipt-url", required=True, help="Receipt URL.")
@click.pass_obj
def order_paid(settings: Settings, order_id: str, reference: str, receipt_url: str) -> None:
    """Apply a payment-succeeded notification by hand."""
    event = PaymentSucceeded(order_id=order_id, payment_reference=reference, receipt_url=receipt_url)
    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        try:
            dto = SettlePaymentHandler(repo).handle(event)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} marked {dto.status}.")


@click.command("consume")
@click.pass_obj
def order_consume(settings: Settings) -> None:
    """Consume payment events from RabbitMQ until interrupted."""
    with bootstrap.connected(bootstrap.order_repository(settings)) as repo:
        consumer = bootstrap.payment_consumer(settings, repo)
        try:
            consumer.start()
        except KeyboardInterrupt:
            click.echo("Stopped.")

from __future__ import annotations

import click

from oms.infrastructure.cli.order_commands import (
    order_consume,
    order_create,
    order_list,
    order_paid,
    order_show,
    order_status,
)
from oms.infrastructure.config import ConfigurationError, Settings
from oms.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Overrides OMS_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """OMS — Order Management Service"""
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    configure_logging(log_level.upper() if log_level else settings.log_level)
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
order.add_command(order_consume)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_paid)
order.add_command(order_show)
order.add_command(order_status)

"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from shopdesk.application.add_order_adjustment import AddOrderAdjustmentHandler
from shopdesk.application.dto import OrderDTO
from shopdesk.application.show_order import ShowOrderHandler
from shopdesk.domain.exceptions import DomainException
from shopdesk.infrastructure.bootstrap import option_repository, order_repository


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    state = "complete" if dto.is_complete else dto.status
    click.echo(f"Order #{dto.number}  (status={state})")
    if dto.billing_name:
        click.echo(f"Customer: {dto.billing_name} <{dto.email}>")
    else:
        click.echo(f"Customer: {dto.email}")
    if dto.created_at:
        click.echo(f"Created:  {dto.created_at}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Subtotal':>14} {'Total':>14}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.subtotal:>14} {item.total:>14}"
        )
    click.echo(f"  {'-'*56}")

    for label, rows in (
        ("Discount", dto.discounts),
        ("Fee", dto.fees),
        ("Credit", dto.credits),
    ):
        for row in rows:
            name = row.description or label
            click.echo(f"  {name:<41} {row.amount:>14}")

    click.echo(f"  {'Subtotal':<41} {dto.subtotal:>14}")
    click.echo(f"  {'Tax (' + dto.tax_rate + ')':<41} {dto.tax:>14}")
    click.echo(f"  {'Order Total':<41} {dto.total:>14}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show an order with its discounts, fees and taxes."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        option_repo=option_repository(),
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("add-adjustment")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to adjust.")
@click.option(
    "--type",
    "adjustment_type",
    type=click.Choice(["fee", "credit"]),
    default="fee",
    show_default=True,
    help="Adjustment type.",
)
@click.option("--amount", required=True, help="Adjustment amount, e.g. 4.50.")
@click.option("--description", default="", help="Shown next to the amount.")
def order_add_adjustment(
    order_id: int, adjustment_type: str, amount: str, description: str
) -> None:
    """Add a manual fee or credit to an order."""
    handler = AddOrderAdjustmentHandler(
        order_repo=order_repository(),
        option_repo=option_repository(),
    )

    try:
        order = handler.handle(order_id, adjustment_type, amount, description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order.display_number()} — {adjustment_type} of {amount} added.")

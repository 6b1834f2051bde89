import logging

import click

from shopdesk.infrastructure.cli.order_commands import order_add_adjustment, order_show
from shopdesk.infrastructure.cli.tax_commands import (
    tax_activate,
    tax_add,
    tax_bulk,
    tax_deactivate,
    tax_list,
    tax_regions,
    tax_remove,
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """shopdesk: orders and tax rates"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


@cli.group()
def order() -> None:
    """Inspect and adjust orders."""


@cli.group()
def tax() -> None:
    """Manage tax rates."""


# Register subcommands
order.add_command(order_add_adjustment)
order.add_command(order_show)
tax.add_command(tax_activate)
tax.add_command(tax_add)
tax.add_command(tax_bulk)
tax.add_command(tax_deactivate)
tax.add_command(tax_list)
tax.add_command(tax_regions)
tax.add_command(tax_remove)

"""CLI commands for the tax rate table.

Each command opens an editing session, applies one change and saves
the table, so the dirty flag never outlives a single invocation.
"""

from __future__ import annotations

import click

from shopdesk.application.tax_rate_table import (
    TaxRateTableController,
    TaxRateTableSession,
)
from shopdesk.domain.exceptions import ConfirmationRequired, DomainException
from shopdesk.domain.model.tax_rate import TaxRateStatus
from shopdesk.domain.repository.tax_rate_gateway import NO_REGIONS
from shopdesk.infrastructure.bootstrap import tax_rate_gateway


def _controller() -> TaxRateTableController:
    return TaxRateTableController(tax_rate_gateway())


def _save(controller: TaxRateTableController, session: TaxRateTableSession) -> None:
    if session.dirty:
        controller.save(session)


def _display_rates(session: TaxRateTableSession) -> None:
    rows = TaxRateTableController.visible_rates(session)
    if not rows:
        click.echo("No tax rates found.")
        return
    click.echo(f"  {'ID':<6} {'Scope':<30} {'Rate':>8} {'Status':>10}")
    click.echo(f"  {'-'*57}")
    for row in rows:
        click.echo(f"  {row.id:<6} {row.scope:<30} {row.amount:>8} {row.status:>10}")


@click.command("list")
@click.option("--all", "show_all", is_flag=True, default=False, help="Include inactive rates.")
def tax_list(show_all: bool) -> None:
    """List tax rates (active only unless --all)."""
    controller = _controller()
    try:
        session = controller.open_session()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_rates(controller.set_show_all(session, show_all))


@click.command("regions")
@click.option("--country", required=True, help="Country code, e.g. US.")
def tax_regions(country: str) -> None:
    """List the regions known for a country."""
    try:
        regions = tax_rate_gateway().lookup_regions(country)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if regions == NO_REGIONS:
        click.echo(f"No regions for {country}; enter the region as free text.")
        return
    for code, label in regions.items():
        click.echo(f"  {code:<6} {label}")


@click.command("add")
@click.option("--country", required=True, help="Country code, or 'all' for every country.")
@click.option("--region", default="", help="Region code; omit for the whole country.")
@click.option("--amount", required=True, help="Rate in percent, e.g. 20.")
@click.option("--yes", "assume_yes", is_flag=True, default=False, help="Accept a 0% rate.")
def tax_add(country: str, region: str, amount: str, assume_yes: bool) -> None:
    """Add a tax rate."""
    controller = _controller()

    try:
        session = controller.open_session()
        controller.select_country(session, country)
        if region:
            if isinstance(session.regions, dict) and region not in session.regions:
                raise click.BadParameter(
                    f"Unknown region '{region}' for {country}. "
                    f"Choose from: {', '.join(session.regions)}",
                    param_hint="--region",
                )
            controller.set_global(session, False)
            controller.set_region(session, region)
        controller.set_amount(session, amount)

        try:
            controller.add_rate(session, confirm_zero=assume_yes)
        except ConfirmationRequired as exc:
            if not click.confirm(str(exc), default=False):
                click.echo("Tax rate not added.")
                return
            controller.add_rate(session, confirm_zero=True)

        _save(controller, session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Tax rate added.")
    _display_rates(session)


@click.command("activate")
@click.option("--id", "rate_id", required=True, help="Tax rate ID to activate.")
def tax_activate(rate_id: str) -> None:
    """Activate a tax rate (rejected if an active rate covers the same scope)."""
    controller = _controller()
    try:
        session = controller.open_session()
        controller.activate(session, rate_id)
        _save(controller, session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tax rate {rate_id} activated.")


@click.command("deactivate")
@click.option("--id", "rate_id", required=True, help="Tax rate ID to deactivate.")
def tax_deactivate(rate_id: str) -> None:
    """Deactivate a tax rate."""
    controller = _controller()
    try:
        session = controller.open_session()
        controller.deactivate(session, rate_id)
        _save(controller, session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tax rate {rate_id} deactivated.")


@click.command("remove")
@click.option("--id", "rate_id", required=True, help="Tax rate ID to remove.")
def tax_remove(rate_id: str) -> None:
    """Remove a tax rate."""
    controller = _controller()
    try:
        session = controller.open_session()
        controller.remove(session, rate_id)
        _save(controller, session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tax rate {rate_id} removed.")


@click.command("bulk")
@click.option("--ids", required=True, help="Comma-separated tax rate IDs.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in TaxRateStatus]),
    help="Status to apply.",
)
def tax_bulk(ids: str, status: str) -> None:
    """Set the status of several tax rates at once."""
    controller = _controller()
    try:
        session = controller.open_session()
        for rate_id in (i.strip() for i in ids.split(",") if i.strip()):
            controller.select(session, rate_id)
        controller.bulk_apply(session, TaxRateStatus(status))
        _save(controller, session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_rates(controller.set_show_all(session, True))

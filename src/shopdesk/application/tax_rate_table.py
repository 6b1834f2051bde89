"""Application service: Tax Rate Table editing session.

The controller turns user intents (add, activate, deactivate, remove,
bulk status changes, save) into calls on a TaxRateCollection and keeps
track of whether the session holds unsaved edits.

All per-session state lives in ``TaxRateTableSession``; the controller
itself is stateless apart from its gateway, so every operation takes the
session and hands it back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from shopdesk.application.dto import TaxRateDTO
from shopdesk.domain.exceptions import EntityNotFoundError, SyncError
from shopdesk.domain.model.tax_rate import TaxRate, TaxRateDraft, TaxRateStatus
from shopdesk.domain.model.tax_rate_collection import TaxRateCollection
from shopdesk.domain.repository.tax_rate_gateway import (
    NO_REGIONS,
    TaxRateGateway,
    TaxRateSeed,
)

logger = logging.getLogger("shopdesk.tax_rates")


@dataclass
class TaxRateTableSession:
    """Everything one editing session owns.

    ``dirty`` is true while there are edits the gateway has not stored
    yet; the presentation layer should ask before leaving the page.
    """

    rates: TaxRateCollection
    draft: TaxRateDraft = field(default_factory=TaxRateDraft)
    dirty: bool = False
    selected: list[str] = field(default_factory=list)
    show_all: bool = False
    regions: dict[str, str] | str = NO_REGIONS

    @property
    def warn_on_exit(self) -> bool:
        return self.dirty


class TaxRateTableController:

    def __init__(self, gateway: TaxRateGateway) -> None:
        self._gateway = gateway

    # --- Session lifecycle ----------------------------------------------------

    def open_session(self) -> TaxRateTableSession:
        """Hydrate a fresh session from the stored rates."""
        rates = [rate_from_seed(seed) for seed in self._gateway.load_rates()]
        return TaxRateTableSession(rates=TaxRateCollection(rates))

    def save(self, session: TaxRateTableSession) -> TaxRateTableSession:
        """Store the whole table and mark the session clean.

        On SyncError nothing changes: the rates stay as they were and the
        dirty flag keeps its previous value.
        """
        seeds = [rate_to_seed(rate) for rate in session.rates]
        try:
            persisted = self._gateway.save_rates(seeds)
        except SyncError:
            logger.warning("Saving %d tax rates failed", len(seeds))
            raise

        session.rates = TaxRateCollection(rate_from_seed(s) for s in persisted)
        session.selected = []
        session.dirty = False
        logger.info("Saved %d tax rates", len(persisted))
        return session

    # --- New-row draft --------------------------------------------------------

    def select_country(
        self, session: TaxRateTableSession, country: str
    ) -> TaxRateTableSession:
        """Set the draft's country and fetch its regions.

        If the lookup fails the draft keeps the new country and the
        previous region options stay in place.
        """
        session.draft.set_country(country)
        session.regions = self._gateway.lookup_regions(session.draft.country)
        return session

    def set_region(self, session: TaxRateTableSession, region: str) -> TaxRateTableSession:
        session.draft.set_region(region)
        return session

    def set_global(self, session: TaxRateTableSession, is_global: bool) -> TaxRateTableSession:
        session.draft.set_global(is_global)
        return session

    def set_amount(self, session: TaxRateTableSession, amount: str) -> TaxRateTableSession:
        session.draft.set_amount(amount)
        return session

    def add_rate(
        self, session: TaxRateTableSession, *, confirm_zero: bool = False
    ) -> TaxRateTableSession:
        """Add the draft to the table and start a fresh draft.

        Validation errors and ConfirmationRequired propagate with the
        session untouched.
        """
        session.rates.add(session.draft.to_rate(), confirm_zero=confirm_zero)
        session.draft = TaxRateDraft()
        session.dirty = True
        return session

    # --- Row actions ----------------------------------------------------------

    def activate(self, session: TaxRateTableSession, rate_id: str) -> TaxRateTableSession:
        session.rates.activate(self._get(session, rate_id))
        session.dirty = True
        return session

    def deactivate(self, session: TaxRateTableSession, rate_id: str) -> TaxRateTableSession:
        session.rates.deactivate(self._get(session, rate_id))
        session.dirty = True
        return session

    def remove(self, session: TaxRateTableSession, rate_id: str) -> TaxRateTableSession:
        session.rates.remove(self._get(session, rate_id))
        session.selected = [s for s in session.selected if s != rate_id]
        session.dirty = True
        return session

    # --- Selection and bulk actions -------------------------------------------

    def select(
        self, session: TaxRateTableSession, rate_id: str, selected: bool = True
    ) -> TaxRateTableSession:
        rate = self._get(session, rate_id)
        rate.selected = selected
        if selected and rate_id not in session.selected:
            session.selected.append(rate_id)
        elif not selected:
            session.selected = [s for s in session.selected if s != rate_id]
        return session

    def select_all(
        self, session: TaxRateTableSession, selected: bool = True
    ) -> TaxRateTableSession:
        for rate in session.rates:
            rate.selected = selected
        session.selected = [r.id for r in session.rates if r.id] if selected else []
        return session

    def bulk_apply(
        self, session: TaxRateTableSession, status: TaxRateStatus
    ) -> TaxRateTableSession:
        """Apply *status* to every selected rate.

        Skips the duplicate-scope check that ``activate`` performs.
        """
        changed = session.rates.bulk_apply_status(session.selected, status)
        if changed:
            session.dirty = True
        logger.info("Set %d tax rates to %s", len(changed), status.value)
        return session

    def set_show_all(self, session: TaxRateTableSession, show_all: bool) -> TaxRateTableSession:
        session.show_all = show_all
        return session

    # --- Views ----------------------------------------------------------------

    @staticmethod
    def visible_rates(session: TaxRateTableSession) -> list[TaxRateDTO]:
        """Rows to render: active rates only, unless "show all" is on.

        An empty list means the table should show its empty-state row.
        """
        return [
            TaxRateDTO(
                id=rate.id or "",
                scope=rate.scope_label,
                amount=rate.formatted_amount,
                status=rate.status.value,
                selected=rate.selected,
            )
            for rate in session.rates
            if session.show_all or rate.is_active
        ]

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _get(session: TaxRateTableSession, rate_id: str) -> TaxRate:
        rate = session.rates.get(rate_id)
        if rate is None:
            raise EntityNotFoundError(f"Tax rate '{rate_id}' not found")
        return rate


# --- Seed mapping -------------------------------------------------------------


def rate_from_seed(seed: TaxRateSeed) -> TaxRate:
    return TaxRate(
        id=seed.id,
        country=seed.country_code,
        region=seed.region_label,
        is_global=seed.scope in ("country", "global"),
        amount=seed.amount,
        status=TaxRateStatus(seed.status),
    )


def rate_to_seed(rate: TaxRate) -> TaxRateSeed:
    if not rate.country:
        scope = "global"
    elif rate.is_global:
        scope = "country"
    else:
        scope = "region"
    return TaxRateSeed(
        id=rate.id or "",
        country_code=rate.country,
        region_label=rate.region,
        scope=scope,
        amount=rate.amount,
        status=rate.status.value,
    )

"""The ordered set of tax rates being edited.

Invariant:
- among ACTIVE rates no two share the same ``(country, region, is_global)``

The duplicate check and the mutation that follows it are not atomic.
The collection is meant for a single writer; callers that share one
across threads must serialize every mutating call themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace
from decimal import Decimal

from shopdesk.domain.exceptions import (
    ConfirmationRequired,
    DuplicateRateError,
    EmptyCountryError,
    NegativeAmountError,
    ValidationError,
)
from shopdesk.domain.model.tax_rate import ALL_COUNTRIES, TaxRate, TaxRateStatus

logger = logging.getLogger("shopdesk.tax_rates")


class TaxRateCollection:

    def __init__(self, rates: Iterable[TaxRate] = ()) -> None:
        self._rates: list[TaxRate] = list(rates)
        self._new_count = 0

    def __iter__(self) -> Iterator[TaxRate]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def get(self, rate_id: str) -> TaxRate | None:
        for rate in self._rates:
            if rate.id == rate_id:
                return rate
        return None

    # --- Queries --------------------------------------------------------------

    def where(
        self,
        *,
        country: str | None = None,
        region: str | None = None,
        is_global: bool | None = None,
        status: TaxRateStatus | None = None,
    ) -> list[TaxRate]:
        """Return every rate matching all of the given fields exactly.

        Fields left as None are not filtered on.
        """
        criteria = {
            name: value
            for name, value in (
                ("country", country),
                ("region", region),
                ("is_global", is_global),
                ("status", status),
            )
            if value is not None
        }
        return [
            rate
            for rate in self._rates
            if all(getattr(rate, name) == value for name, value in criteria.items())
        ]

    # --- Mutations ------------------------------------------------------------

    def add(self, rate: TaxRate, *, confirm_zero: bool = False) -> TaxRate:
        """Validate a new rate and append it as ACTIVE.

        Checks run in order: empty country, duplicate scope, negative
        amount, zero amount.  Every check happens before the append, so a
        rejected rate leaves the collection untouched.  A zero amount is
        only accepted when *confirm_zero* is set.
        """
        if not rate.country:
            raise EmptyCountryError()

        country, region = rate.country, rate.region
        if country == ALL_COUNTRIES:
            country, region = "", ""
        is_global = region == ""

        self._ensure_unique(country, region, is_global)

        if not rate.amount.is_finite():
            raise ValidationError(f"Invalid tax rate amount: {rate.amount}")
        if rate.amount < Decimal("0"):
            raise NegativeAmountError()
        if rate.amount == Decimal("0") and not confirm_zero:
            raise ConfirmationRequired(
                "This tax rate is 0%. Add it anyway?"
            )

        added = replace(
            rate,
            id=rate.id or self._next_new_id(),
            country=country,
            region=region,
            is_global=is_global,
            status=TaxRateStatus.ACTIVE,
            unsaved=False,
            selected=False,
        )
        self._rates.append(added)
        logger.info("Added tax rate %s for %s", added.formatted_amount, added.scope_label)
        return added

    def activate(self, rate: TaxRate) -> None:
        """Mark a rate ACTIVE unless another active rate covers its scope."""
        self._ensure_unique(rate.country, rate.region, rate.region == "", ignore=rate)
        rate.status = TaxRateStatus.ACTIVE

    def deactivate(self, rate: TaxRate) -> None:
        rate.status = TaxRateStatus.INACTIVE

    def remove(self, rate: TaxRate) -> None:
        self._rates = [r for r in self._rates if r is not rate]

    def bulk_apply_status(
        self, selected_ids: Iterable[str], new_status: TaxRateStatus
    ) -> list[TaxRate]:
        """Set *new_status* on every selected rate.

        Unlike ``activate()`` this does not check for duplicate scopes,
        so a bulk activation can leave two active rates on one scope.
        """
        changed: list[TaxRate] = []
        for rate_id in selected_ids:
            rate = self.get(rate_id)
            if rate is None:
                continue
            rate.status = new_status
            changed.append(rate)
        return changed

    # --- Internal helpers -----------------------------------------------------

    def _ensure_unique(
        self,
        country: str,
        region: str,
        is_global: bool,
        ignore: TaxRate | None = None,
    ) -> None:
        conflicts = [
            r
            for r in self.where(
                country=country,
                region=region,
                is_global=is_global,
                status=TaxRateStatus.ACTIVE,
            )
            if r is not ignore
        ]
        if conflicts:
            logger.debug("Rejected duplicate tax rate for %s", conflicts[0].scope_label)
            raise DuplicateRateError(conflicts[0].scope_label)

    def _next_new_id(self) -> str:
        while True:
            self._new_count += 1
            candidate = f"new-{self._new_count}"
            if self.get(candidate) is None:
                return candidate

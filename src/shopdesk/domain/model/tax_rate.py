"""Tax rate rules and the new-row draft used to compose them.

A rate applies to one scope: every country (empty country), a whole
country (``is_global``), or a single region within a country.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from shopdesk.domain.model.value_objects import to_decimal

# Country value meaning "every country".
ALL_COUNTRIES = "*"


class TaxRateStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class TaxRate:
    """A single tax rate rule.

    ``unsaved`` is only ever true for the row being composed in the
    draft; ``selected`` is bulk-action state and is never persisted.
    """

    id: str | None
    country: str
    region: str = ""
    is_global: bool = True
    amount: Decimal = Decimal("0")
    status: TaxRateStatus = TaxRateStatus.ACTIVE
    unsaved: bool = False
    selected: bool = False

    @property
    def is_active(self) -> bool:
        return self.status is TaxRateStatus.ACTIVE

    @property
    def scope_label(self) -> str:
        """Human-readable scope, e.g. ``"FR"``, ``"US: CA"`` or ``"*"``."""
        label = self.country or ALL_COUNTRIES
        if self.region:
            label += f": {self.region}"
        return label

    @property
    def formatted_amount(self) -> str:
        if not self.amount:
            return "0%"
        return f"{self.amount:.2f}%"


@dataclass
class TaxRateDraft:
    """The in-progress "add new rate" row."""

    country: str = ""
    region: str = ""
    is_global: bool = True
    amount: Decimal = Decimal("0")

    def set_country(self, country: str) -> None:
        # "all" covers every country and is never regional. A region only
        # makes sense for the country it was picked under.
        if country == "all":
            country = ALL_COUNTRIES
        if country == ALL_COUNTRIES or country != self.country:
            self.region = ""
            self.is_global = True
        self.country = country

    def set_region(self, region: str) -> None:
        self.region = region.strip()

    def set_global(self, is_global: bool) -> None:
        self.is_global = is_global
        if is_global:
            self.region = ""

    def set_amount(self, amount: str | int | Decimal) -> None:
        self.amount = to_decimal(amount)

    def to_rate(self) -> TaxRate:
        return TaxRate(
            id=None,
            country=self.country,
            region=self.region,
            is_global=self.is_global,
            amount=self.amount,
            unsaved=True,
        )

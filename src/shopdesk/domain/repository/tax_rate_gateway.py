"""Abstract synchronization boundary for the tax rate table.

The gateway hydrates the table, resolves a country's regions and
persists the edited table.  Implementations raise SyncError when the
remote side fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

# Returned by ``lookup_regions`` when a country has no subdivisions.
NO_REGIONS = "nostates"


@dataclass(frozen=True)
class TaxRateSeed:
    """One stored tax rate row, as exchanged with the gateway."""

    id: str
    country_code: str
    region_label: str
    scope: str  # "country" for whole-country rates, "region" otherwise
    amount: Decimal
    status: str


class TaxRateGateway(ABC):

    @abstractmethod
    def load_rates(self) -> list[TaxRateSeed]:
        """Return every stored rate in display order."""

    @abstractmethod
    def lookup_regions(self, country_code: str) -> dict[str, str] | str:
        """Return ``{code: label}`` for the country, or ``NO_REGIONS``."""

    @abstractmethod
    def save_rates(self, rates: list[TaxRateSeed]) -> list[TaxRateSeed]:
        """Replace the stored table and return the rows as persisted."""

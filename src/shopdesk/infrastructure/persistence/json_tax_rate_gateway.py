"""JSON-file-backed implementation of TaxRateGateway.

Rates live in ``tax_rates.json``; region options per country live in
``regions.json`` as ``{"US": {"CA": "California", ...}}``.  File and
decoding errors are reported as SyncError so the editing session can
keep its local state.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from shopdesk.domain.exceptions import SyncError
from shopdesk.domain.repository.tax_rate_gateway import (
    NO_REGIONS,
    TaxRateGateway,
    TaxRateSeed,
)

logger = logging.getLogger("shopdesk.tax_rates")


class JsonTaxRateGateway(TaxRateGateway):

    def __init__(self, rates_path: Path, regions_path: Path) -> None:
        self._rates_path = rates_path
        self._regions_path = regions_path

    # --- TaxRateGateway interface ---------------------------------------------

    def load_rates(self) -> list[TaxRateSeed]:
        if not self._rates_path.exists():
            return []
        return [self._to_seed(raw) for raw in self._read(self._rates_path)]

    def lookup_regions(self, country_code: str) -> dict[str, str] | str:
        if not country_code or not self._regions_path.exists():
            return NO_REGIONS
        regions = self._read(self._regions_path).get(country_code)
        return dict(regions) if regions else NO_REGIONS

    def save_rates(self, rates: list[TaxRateSeed]) -> list[TaxRateSeed]:
        # Rows composed in the session carry temporary IDs; give them real ones.
        # IDs of rows already removed from the file are never handed out again.
        numeric = [int(r.id) for r in [*self.load_rates(), *rates] if r.id.isdigit()]
        next_id = max(numeric, default=0) + 1
        persisted: list[TaxRateSeed] = []
        for rate in rates:
            if not rate.id.isdigit():
                rate = TaxRateSeed(
                    id=str(next_id),
                    country_code=rate.country_code,
                    region_label=rate.region_label,
                    scope=rate.scope,
                    amount=rate.amount,
                    status=rate.status,
                )
                next_id += 1
            persisted.append(rate)

        try:
            self._rates_path.parent.mkdir(parents=True, exist_ok=True)
            self._rates_path.write_text(
                json.dumps([self._to_raw(r) for r in persisted], indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise SyncError(f"Could not save tax rates: {exc}") from exc
        return persisted

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_seed(raw: dict) -> TaxRateSeed:
        return TaxRateSeed(
            id=str(raw["id"]),
            country_code=raw.get("name", ""),
            region_label=raw.get("description", ""),
            scope=raw.get("scope", "country"),
            amount=Decimal(str(raw.get("amount", "0"))),
            status=raw.get("status", "active"),
        )

    @staticmethod
    def _to_raw(seed: TaxRateSeed) -> dict:
        return {
            "id": int(seed.id),
            "name": seed.country_code,
            "description": seed.region_label,
            "scope": seed.scope,
            "amount": str(seed.amount),
            "status": seed.status,
        }

    @staticmethod
    def _read(path: Path):
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Could not read %s: %s", path, exc)
            raise SyncError(f"Could not read {path.name}") from exc

"""Composition root: builds the concrete adapters behind the domain ports.

Only this module imports the JSON adapters; the domain and
application layers see the abstract repositories.
"""

from __future__ import annotations

import os
from pathlib import Path

from shopdesk.infrastructure.persistence.json_option_repository import (
    JsonOptionRepository,
)
from shopdesk.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from shopdesk.infrastructure.persistence.json_tax_rate_gateway import (
    JsonTaxRateGateway,
)

# Repo-root data/ directory (editable installs).
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    """Data directory, overridable with the SHOPDESK_DATA_DIR variable."""
    override = os.environ.get("SHOPDESK_DATA_DIR")
    return Path(override) if override else _DEFAULT_DATA_DIR


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def option_repository() -> JsonOptionRepository:
    return JsonOptionRepository(data_dir() / "options.json")


def tax_rate_gateway() -> JsonTaxRateGateway:
    return JsonTaxRateGateway(
        data_dir() / "tax_rates.json",
        data_dir() / "regions.json",
    )

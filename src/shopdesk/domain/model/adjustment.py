"""Order adjustments: discounts, tax rates, fees and credits.

An adjustment belongs to exactly one owner (an order or an order item)
and its ``type`` never changes after creation, hence the frozen dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AdjustmentType(Enum):
    DISCOUNT = "discount"
    TAX_RATE = "tax_rate"
    FEE = "fee"
    CREDIT = "credit"


class OwnerType(Enum):
    ORDER = "order"
    ORDER_ITEM = "order_item"


@dataclass(frozen=True)
class Adjustment:
    """A typed modifier attached to an order or an order item.

    ``amount`` is a currency amount for discounts, fees and credits, and
    a percentage for ``tax_rate`` adjustments.  ``fee_reference`` is the
    external fee identifier used to deduplicate fees across an order.
    """

    id: int
    owner_id: int
    owner_type: OwnerType
    type: AdjustmentType
    amount: Decimal
    description: str = ""
    fee_reference: str | None = None
    date_created: datetime | None = None

    @property
    def is_fee(self) -> bool:
        return self.type is AdjustmentType.FEE

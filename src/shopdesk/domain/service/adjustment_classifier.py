"""Domain service: Adjustment Classifier.

Pure functions that split a flat list of adjustments into discount,
tax, fee and credit buckets.  Nothing here touches storage, so the
Order aggregate and the tests can call it over any in-memory lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from shopdesk.domain.model.adjustment import Adjustment, AdjustmentType


@dataclass(frozen=True)
class AdjustmentBreakdown:
    """Result of classifying an order's adjustments."""

    discounts: list[Adjustment] = field(default_factory=list)
    taxes: list[Adjustment] = field(default_factory=list)
    fees: dict[str, Adjustment] = field(default_factory=dict)
    credits: list[Adjustment] = field(default_factory=list)

    @property
    def tax_rate(self) -> Decimal:
        return effective_tax_rate(self.taxes)


def discounts(adjustments: Iterable[Adjustment]) -> list[Adjustment]:
    return _of_type(adjustments, AdjustmentType.DISCOUNT)


def taxes(adjustments: Iterable[Adjustment]) -> list[Adjustment]:
    return _of_type(adjustments, AdjustmentType.TAX_RATE)


def credits(adjustments: Iterable[Adjustment]) -> list[Adjustment]:
    return _of_type(adjustments, AdjustmentType.CREDIT)


def fees(
    adjustments: Iterable[Adjustment],
    item_fees: Iterable[Sequence[Adjustment]] = (),
) -> dict[str, Adjustment]:
    """Fold order-level and item-level fees into one map keyed by fee reference.

    Order-level fees go in first, then each item's fees in item order.
    A later fee with the same reference replaces the earlier one outright.
    Fees without a reference share the empty-string key.
    """
    folded: dict[str, Adjustment] = {}
    for adjustment in adjustments:
        if adjustment.is_fee:
            folded[adjustment.fee_reference or ""] = adjustment
    for per_item in item_fees:
        for adjustment in per_item:
            if adjustment.is_fee:
                folded[adjustment.fee_reference or ""] = adjustment
    return folded


def effective_tax_rate(adjustments: Iterable[Adjustment]) -> Decimal:
    """Amount of the first ``tax_rate`` adjustment, or 0 when there is none."""
    for adjustment in adjustments:
        if adjustment.type is AdjustmentType.TAX_RATE:
            return adjustment.amount
    return Decimal("0")


def classify(
    adjustments: Sequence[Adjustment],
    item_fees: Iterable[Sequence[Adjustment]] = (),
) -> AdjustmentBreakdown:
    return AdjustmentBreakdown(
        discounts=discounts(adjustments),
        taxes=taxes(adjustments),
        fees=fees(adjustments, item_fees),
        credits=credits(adjustments),
    )


def _of_type(
    adjustments: Iterable[Adjustment], kind: AdjustmentType
) -> list[Adjustment]:
    return [a for a in adjustments if a.type is kind]

"""Application service: Add Order Adjustment use case.

Adds a manual fee or credit to an existing order.  The Order aggregate
is a read snapshot, so the adjustment is written through the repository
and the order is loaded again to reflect it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from shopdesk.domain.exceptions import ValidationError
from shopdesk.domain.model.adjustment import Adjustment, AdjustmentType, OwnerType
from shopdesk.domain.model.order import Order
from shopdesk.domain.model.value_objects import to_decimal
from shopdesk.domain.repository.option_repository import OptionRepository
from shopdesk.domain.repository.order_repository import OrderRepository

logger = logging.getLogger("shopdesk.orders")

MANUAL_ADJUSTMENT_TYPES = (AdjustmentType.FEE, AdjustmentType.CREDIT)


class AddOrderAdjustmentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        option_repo: OptionRepository,
    ) -> None:
        self._order_repo = order_repo
        self._option_repo = option_repo

    def handle(
        self,
        order_id: int,
        adjustment_type: str,
        amount: str,
        description: str = "",
    ) -> Order:
        try:
            kind = AdjustmentType(adjustment_type)
        except ValueError:
            raise ValidationError(f"Unknown adjustment type '{adjustment_type}'")
        if kind not in MANUAL_ADJUSTMENT_TYPES:
            raise ValidationError("Only fees and credits can be added manually")

        value = to_decimal(amount)
        if value <= Decimal("0"):
            raise ValidationError("Adjustment amount must be greater than zero")

        # Manual fees get their own reference so they never replace each other.
        fee_reference = None
        if kind is AdjustmentType.FEE:
            fee_reference = f"manual-{uuid4().hex[:12]}"

        # Fails with EntityNotFoundError before anything is written.
        Order.load(order_id, self._order_repo, self._option_repo)

        saved = self._order_repo.add_adjustment(
            Adjustment(
                id=0,
                owner_id=order_id,
                owner_type=OwnerType.ORDER,
                type=kind,
                amount=value,
                description=description.strip(),
                fee_reference=fee_reference,
                date_created=datetime.now(timezone.utc),
            )
        )
        logger.info(
            "Added %s adjustment #%s to order #%s", kind.value, saved.id, order_id
        )
        return Order.load(order_id, self._order_repo, self._option_repo)

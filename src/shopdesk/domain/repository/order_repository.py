"""Abstract repository for the Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Reads are row-oriented, mirroring the order,
order item, adjustment and address tables they come from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from shopdesk.domain.model.address import Address
from shopdesk.domain.model.adjustment import Adjustment
from shopdesk.domain.model.note import Note
from shopdesk.domain.model.order import OrderHeader, OrderItem


class OrderRepository(ABC):

    @abstractmethod
    def find_order(self, order_id: int) -> OrderHeader | None:
        """Return the stored order header, or None if not found."""

    @abstractmethod
    def list_order_items(self, order_id: int) -> list[OrderItem]:
        """Return the order's items ordered by cart position ascending."""

    @abstractmethod
    def list_order_adjustments(
        self, owner_id: int, owner_type: str = "order"
    ) -> list[Adjustment]:
        """Return adjustments for one owner ordered by creation ascending."""

    @abstractmethod
    def get_item_fee_adjustments(self, item_id: int) -> list[Adjustment]:
        """Return the fee adjustments attached to one order item."""

    @abstractmethod
    def find_address(self, order_id: int) -> Address | None:
        """Return the billing address linked to the order, or None."""

    @abstractmethod
    def get_order_meta(self, order_id: int, key: str) -> Any:
        """Return a single order meta value, or None if unset."""

    @abstractmethod
    def list_notes(self, object_id: int, object_type: str) -> list[Note]:
        """Return notes attached to an object, oldest first."""

    @abstractmethod
    def add_adjustment(self, adjustment: Adjustment) -> Adjustment:
        """Persist a new adjustment and return it with its assigned ID."""

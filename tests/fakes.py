"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON adapters
but keep everything in lists and dicts. No file I/O, no side effects.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any

from shopdesk.domain.exceptions import SyncError
from shopdesk.domain.model.address import Address
from shopdesk.domain.model.adjustment import Adjustment, AdjustmentType, OwnerType
from shopdesk.domain.model.note import Note
from shopdesk.domain.model.order import OrderHeader, OrderItem
from shopdesk.domain.model.value_objects import Money, Quantity
from shopdesk.domain.repository.option_repository import OptionRepository
from shopdesk.domain.repository.order_repository import OrderRepository
from shopdesk.domain.repository.tax_rate_gateway import (
    NO_REGIONS,
    TaxRateGateway,
    TaxRateSeed,
)


def make_item(item_id: int, order_id: int = 1, cart_index: int = 0, name: str = "E-book") -> OrderItem:
    """Helper to build a stored order item."""
    return OrderItem(
        id=item_id,
        order_id=order_id,
        product_id=100 + item_id,
        product_name=name,
        cart_index=cart_index,
        quantity=Quantity(1),
        subtotal=Money.of("10.00"),
        discount=Money.zero(),
        tax=Money.of("2.00"),
        total=Money.of("12.00"),
    )


def make_adjustment(
    adj_id: int,
    kind: AdjustmentType,
    amount: str = "1.00",
    owner_id: int = 1,
    owner_type: OwnerType = OwnerType.ORDER,
    fee_reference: str | None = None,
) -> Adjustment:
    return Adjustment(
        id=adj_id,
        owner_id=owner_id,
        owner_type=owner_type,
        type=kind,
        amount=Decimal(amount),
        fee_reference=fee_reference,
    )


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self.orders: dict[int, OrderHeader] = {}
        self.items: list[OrderItem] = []
        self.adjustments: list[Adjustment] = []
        self.addresses: list[Address] = []
        self.meta: dict[tuple[int, str], Any] = {}
        self.notes: list[Note] = []
        self.address_lookups = 0

    def find_order(self, order_id: int) -> OrderHeader | None:
        return self.orders.get(order_id)

    def list_order_items(self, order_id: int) -> list[OrderItem]:
        items = [i for i in self.items if i.order_id == order_id]
        return sorted(items, key=lambda i: i.cart_index)

    def list_order_adjustments(
        self, owner_id: int, owner_type: str = "order"
    ) -> list[Adjustment]:
        return [
            a
            for a in self.adjustments
            if a.owner_id == owner_id and a.owner_type.value == owner_type
        ]

    def get_item_fee_adjustments(self, item_id: int) -> list[Adjustment]:
        return [
            a
            for a in self.list_order_adjustments(item_id, "order_item")
            if a.is_fee
        ]

    def find_address(self, order_id: int) -> Address | None:
        self.address_lookups += 1
        for address in self.addresses:
            if address.order_id == order_id:
                return address
        return None

    def get_order_meta(self, order_id: int, key: str) -> Any:
        return self.meta.get((order_id, key))

    def list_notes(self, object_id: int, object_type: str) -> list[Note]:
        return [
            n
            for n in self.notes
            if n.object_id == object_id and n.object_type == object_type
        ]

    def add_adjustment(self, adjustment: Adjustment) -> Adjustment:
        saved = replace(adjustment, id=len(self.adjustments) + 1)
        self.adjustments.append(saved)
        return saved


class FakeOptionRepository(OptionRepository):

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.options = dict(options or {})

    def read_option(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)


class FakeTaxRateGateway(TaxRateGateway):

    def __init__(
        self,
        rates: list[TaxRateSeed] | None = None,
        regions: dict[str, dict[str, str]] | None = None,
    ) -> None:
        self.rates = list(rates or [])
        self.regions = dict(regions or {})
        self.fail = False
        self.saved: list[list[TaxRateSeed]] = []

    def load_rates(self) -> list[TaxRateSeed]:
        return list(self.rates)

    def lookup_regions(self, country_code: str) -> dict[str, str] | str:
        if self.fail:
            raise SyncError("Region lookup failed")
        return self.regions.get(country_code) or NO_REGIONS

    def save_rates(self, rates: list[TaxRateSeed]) -> list[TaxRateSeed]:
        if self.fail:
            raise SyncError("Save failed")
        known = [*self.rates, *rates]
        next_id = max((int(r.id) for r in known if r.id.isdigit()), default=0) + 1
        persisted = []
        for rate in rates:
            if not rate.id.isdigit():
                rate = replace(rate, id=str(next_id))
                next_id += 1
            persisted.append(rate)
        self.saved.append(persisted)
        self.rates = persisted
        return persisted

"""Order aggregate: a placed order with its items and adjustments.

The Order is an aggregate root that owns its line items and adjustments.
It is a read snapshot: it is assembled once from storage by
``Order.load()`` and never patched in place.  When the stored order
changes, load it again.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from shopdesk.domain.exceptions import EntityNotFoundError
from shopdesk.domain.model.address import Address
from shopdesk.domain.model.adjustment import Adjustment
from shopdesk.domain.model.note import Note
from shopdesk.domain.model.value_objects import Money, Quantity
from shopdesk.domain.service import adjustment_classifier

if TYPE_CHECKING:
    from shopdesk.domain.repository.option_repository import OptionRepository
    from shopdesk.domain.repository.order_repository import OrderRepository


class OrderStatus(Enum):
    """Statuses this package knows by name.

    Stored rows may carry other statuses; headers keep the raw string.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "publish"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    REVOKED = "revoked"
    FAILED = "failed"
    ABANDONED = "abandoned"
    ON_HOLD = "on_hold"


# Option that switches displayed order numbers to the sequential scheme.
SEQUENTIAL_NUMBERS_OPTION = "enable_sequential"


@dataclass(frozen=True)
class OrderItem:
    """One purchased product line, as stored at checkout.

    Carries its own money breakdown and its own fee adjustments.
    """

    id: int
    order_id: int
    product_id: int
    product_name: str
    cart_index: int
    quantity: Quantity
    subtotal: Money
    discount: Money
    tax: Money
    total: Money
    status: str = "complete"
    fees: tuple[Adjustment, ...] = ()


@dataclass(frozen=True)
class OrderHeader:
    """Stored header fields of an order row."""

    id: int
    order_number: str = ""
    status: str = OrderStatus.PENDING.value
    parent: int | None = None
    date_created: datetime | None = None
    date_completed: datetime | None = None
    user_id: int = 0
    customer_id: int = 0
    email: str = ""
    ip: str = ""
    gateway: str = ""
    mode: str = "live"
    currency: str = "USD"
    payment_key: str = ""
    subtotal: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass
class Order:
    """Aggregate root for a placed order.

    Derived views (discounts, taxes, fees, tax rate) are computed from
    the loaded adjustments by the adjustment classifier.  The billing
    address and order meta are looked up on demand through the
    repository the order was loaded from.
    """

    header: OrderHeader
    items: tuple[OrderItem, ...]
    adjustments: tuple[Adjustment, ...]
    _repo: OrderRepository = field(repr=False, compare=False)
    _options: OptionRepository = field(repr=False, compare=False)
    _address: Address | None = field(default=None, init=False, repr=False, compare=False)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def load(
        order_id: int,
        repo: OrderRepository,
        options: OptionRepository,
    ) -> Order:
        """Assemble an order with its items and adjustments.

        Raises EntityNotFoundError if the order ID does not resolve.
        """
        header = repo.find_order(order_id)
        if header is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        items = tuple(
            replace(item, fees=tuple(repo.get_item_fee_adjustments(item.id)))
            for item in repo.list_order_items(order_id)
        )
        adjustments = tuple(repo.list_order_adjustments(order_id))

        return Order(
            header=header,
            items=items,
            adjustments=adjustments,
            _repo=repo,
            _options=options,
        )

    # --- Header shortcuts -----------------------------------------------------

    @property
    def id(self) -> int:
        return self.header.id

    @property
    def status(self) -> str:
        return self.header.status

    @property
    def currency(self) -> str:
        return self.header.currency

    @property
    def is_complete(self) -> bool:
        return self.header.status == OrderStatus.COMPLETE.value

    # --- Adjustment views -----------------------------------------------------

    @property
    def discounts(self) -> list[Adjustment]:
        return adjustment_classifier.discounts(self.adjustments)

    @property
    def taxes(self) -> list[Adjustment]:
        return adjustment_classifier.taxes(self.adjustments)

    @property
    def credits(self) -> list[Adjustment]:
        return adjustment_classifier.credits(self.adjustments)

    @property
    def fees(self) -> dict[str, Adjustment]:
        """Order-level and item-level fees, keyed by fee reference."""
        return adjustment_classifier.fees(
            self.adjustments, (item.fees for item in self.items)
        )

    @property
    def tax_rate(self) -> Decimal:
        return adjustment_classifier.effective_tax_rate(self.adjustments)

    # --- Lookups --------------------------------------------------------------

    def address(self) -> Address:
        """Billing address, or a zero-value Address if none is on file."""
        if self._address is None:
            self._address = self._repo.find_address(self.id) or Address.empty()
        return self._address

    def display_number(self) -> str:
        """Sequential number when that scheme is enabled and one was assigned."""
        if self.header.order_number and self._options.read_option(
            SEQUENTIAL_NUMBERS_OPTION
        ):
            return self.header.order_number
        return str(self.id)

    def transaction_id(self) -> str:
        return str(self._repo.get_order_meta(self.id, "transaction_id") or "")

    def has_unlimited_downloads(self) -> bool:
        return bool(self._repo.get_order_meta(self.id, "unlimited_downloads"))

    def notes(self) -> list[Note]:
        return self._repo.list_notes(self.id, "order")

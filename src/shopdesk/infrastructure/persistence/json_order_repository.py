"""JSON-file-backed implementation of OrderRepository.

The file holds one list per table (``orders``, ``order_items``,
``order_adjustments``, ``order_addresses``, ``order_meta``, ``notes``)
so the rows look the way the relational store keeps them.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from shopdesk.domain.model.address import Address
from shopdesk.domain.model.adjustment import Adjustment, AdjustmentType, OwnerType
from shopdesk.domain.model.note import Note
from shopdesk.domain.model.order import OrderHeader, OrderItem, OrderStatus
from shopdesk.domain.model.value_objects import Money, Quantity
from shopdesk.domain.repository.order_repository import OrderRepository

_TABLES = (
    "orders",
    "order_items",
    "order_adjustments",
    "order_addresses",
    "order_meta",
    "notes",
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def find_order(self, order_id: int) -> OrderHeader | None:
        for raw in self._rows("orders"):
            if raw["id"] == order_id:
                return self._to_header(raw)
        return None

    def list_order_items(self, order_id: int) -> list[OrderItem]:
        currency = self._currency_of(order_id)
        rows = [r for r in self._rows("order_items") if r["order_id"] == order_id]
        rows.sort(key=lambda r: r.get("cart_index", 0))
        return [self._to_item(r, currency) for r in rows]

    def list_order_adjustments(
        self, owner_id: int, owner_type: str = "order"
    ) -> list[Adjustment]:
        rows = [
            r
            for r in self._rows("order_adjustments")
            if r["object_id"] == owner_id and r["object_type"] == owner_type
        ]
        rows.sort(key=lambda r: (r.get("date_created") or "", r["id"]))
        return [self._to_adjustment(r) for r in rows]

    def get_item_fee_adjustments(self, item_id: int) -> list[Adjustment]:
        return [
            a
            for a in self.list_order_adjustments(item_id, OwnerType.ORDER_ITEM.value)
            if a.is_fee
        ]

    def find_address(self, order_id: int) -> Address | None:
        for raw in self._rows("order_addresses"):
            if raw["order_id"] == order_id:
                return Address(
                    id=raw["id"],
                    order_id=raw["order_id"],
                    first_name=raw.get("first_name", ""),
                    last_name=raw.get("last_name", ""),
                    address=raw.get("address", ""),
                    address2=raw.get("address2", ""),
                    city=raw.get("city", ""),
                    region=raw.get("region", ""),
                    postal_code=raw.get("postal_code", ""),
                    country=raw.get("country", ""),
                )
        return None

    def get_order_meta(self, order_id: int, key: str) -> Any:
        for raw in self._rows("order_meta"):
            if raw["order_id"] == order_id and raw["key"] == key:
                return raw["value"]
        return None

    def list_notes(self, object_id: int, object_type: str) -> list[Note]:
        notes = [
            Note(
                id=r["id"],
                object_id=r["object_id"],
                object_type=r["object_type"],
                content=r["content"],
                date_created=datetime.fromisoformat(r["date_created"]),
                user_id=r.get("user_id", 0),
            )
            for r in self._rows("notes")
            if r["object_id"] == object_id and r["object_type"] == object_type
        ]
        return sorted(notes, key=lambda n: (n.date_created, n.id))

    def add_adjustment(self, adjustment: Adjustment) -> Adjustment:
        data = self._load_raw()
        rows = data["order_adjustments"]
        new_id = max((r["id"] for r in rows), default=0) + 1
        rows.append(
            {
                "id": new_id,
                "object_id": adjustment.owner_id,
                "object_type": adjustment.owner_type.value,
                "type": adjustment.type.value,
                "amount": str(adjustment.amount),
                "description": adjustment.description,
                "fee_id": adjustment.fee_reference,
                "date_created": (
                    adjustment.date_created.isoformat()
                    if adjustment.date_created
                    else None
                ),
            }
        )
        self._persist_raw(data)
        return self._to_adjustment(rows[-1])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_header(raw: dict) -> OrderHeader:
        return OrderHeader(
            id=raw["id"],
            order_number=raw.get("order_number") or "",
            status=raw.get("status") or OrderStatus.PENDING.value,
            parent=raw.get("parent"),
            date_created=_parse_date(raw.get("date_created")),
            date_completed=_parse_date(raw.get("date_completed")),
            user_id=raw.get("user_id", 0),
            customer_id=raw.get("customer_id", 0),
            email=raw.get("email", ""),
            ip=raw.get("ip", ""),
            gateway=raw.get("gateway", ""),
            mode=raw.get("mode", "live"),
            currency=raw.get("currency", "USD"),
            payment_key=raw.get("payment_key", ""),
            subtotal=Decimal(str(raw.get("subtotal", "0"))),
            tax=Decimal(str(raw.get("tax", "0"))),
            discount=Decimal(str(raw.get("discount", "0"))),
            total=Decimal(str(raw.get("total", "0"))),
        )

    @staticmethod
    def _to_item(raw: dict, currency: str) -> OrderItem:
        return OrderItem(
            id=raw["id"],
            order_id=raw["order_id"],
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            cart_index=raw.get("cart_index", 0),
            quantity=Quantity(raw.get("quantity", 1)),
            subtotal=Money.of(raw.get("subtotal", "0"), currency),
            discount=Money.of(raw.get("discount", "0"), currency),
            tax=Money.of(raw.get("tax", "0"), currency),
            total=Money.of(raw.get("total", "0"), currency),
            status=raw.get("status", "complete"),
        )

    @staticmethod
    def _to_adjustment(raw: dict) -> Adjustment:
        return Adjustment(
            id=raw["id"],
            owner_id=raw["object_id"],
            owner_type=OwnerType(raw["object_type"]),
            type=AdjustmentType(raw["type"]),
            amount=Decimal(str(raw["amount"])),
            description=raw.get("description", ""),
            fee_reference=raw.get("fee_id"),
            date_created=_parse_date(raw.get("date_created")),
        )

    def _currency_of(self, order_id: int) -> str:
        header = self.find_order(order_id)
        return header.currency if header else "USD"

    # --- File helpers ---------------------------------------------------------

    def _rows(self, table: str) -> list[dict]:
        return self._load_raw()[table]

    def _load_raw(self) -> dict[str, list[dict]]:
        data = json.loads(self._file_path.read_text(encoding="utf-8"))
        for table in _TABLES:
            data.setdefault(table, [])
        return data

    def _persist_raw(self, data: dict[str, list[dict]]) -> None:
        self._file_path.write_text(
            json.dumps(data, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist_raw({table: [] for table in _TABLES})


def _parse_date(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None

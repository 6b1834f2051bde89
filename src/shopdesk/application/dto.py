"""Data Transfer Objects handed from the application layer to the CLI.

Values are pre-formatted strings so the CLI never touches Money,
Decimal or the domain enums directly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    quantity: int
    subtotal: str
    tax: str
    total: str
    fees: list[str]


@dataclass(frozen=True)
class AdjustmentDTO:
    type: str
    description: str
    amount: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order with its financial breakdown."""

    id: int
    number: str
    status: str
    is_complete: bool
    email: str
    billing_name: str
    billing_country: str
    items: list[OrderItemDTO]
    discounts: list[AdjustmentDTO]
    taxes: list[AdjustmentDTO]
    fees: list[AdjustmentDTO]
    credits: list[AdjustmentDTO]
    tax_rate: str
    subtotal: str
    tax: str
    discount: str
    total: str
    created_at: str


@dataclass(frozen=True)
class TaxRateDTO:
    """Output: one row of the tax rate table."""

    id: str
    scope: str
    amount: str
    status: str
    selected: bool

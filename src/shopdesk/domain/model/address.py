"""Billing address attached to an order."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    id: int = 0
    order_id: int = 0
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    address2: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""

    @staticmethod
    def empty() -> Address:
        """Zero-value address returned when an order has none on file."""
        return Address()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

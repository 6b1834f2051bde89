"""Abstract access to store-wide settings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class OptionRepository(ABC):

    @abstractmethod
    def read_option(self, name: str, default: Any = None) -> Any:
        """Return a stored setting, or *default* if it was never set."""

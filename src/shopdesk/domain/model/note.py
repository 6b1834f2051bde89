"""Free-text note attached to an order (admin or system generated)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Note:
    id: int
    object_id: int
    object_type: str
    content: str
    date_created: datetime
    user_id: int = 0

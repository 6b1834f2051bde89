"""JSON-file-backed store-wide settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shopdesk.domain.repository.option_repository import OptionRepository


class JsonOptionRepository(OptionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def read_option(self, name: str, default: Any = None) -> Any:
        if not self._file_path.exists():
            return default
        options = json.loads(self._file_path.read_text(encoding="utf-8"))
        return options.get(name, default)

"""Per unit-of-work accumulation of diagnostic data."""

from __future__ import annotations

from collections import defaultdict
from typing import Any


class DataCollector:
    """Accumulating store keyed by category (e.g. ``sql_queries``)."""

    def __init__(self) -> None:
        self._data: defaultdict[str, list[Any]] = defaultdict(list)

    def get_by_key(self, category: str) -> list[Any]:
        """Return a copy of the records collected under ``category``."""
        return list(self._data.get(category, []))

    def set_in_array(self, category: str, record: Any) -> None:
        """Append one record under ``category``."""
        self._data[category].append(record)

    def reset(self) -> None:
        """Drop everything collected so far."""
        self._data.clear()

    def __len__(self) -> int:
        return sum(len(records) for records in self._data.values())

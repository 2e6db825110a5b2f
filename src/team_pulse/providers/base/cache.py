from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def make_cache_key(path: str, params: Mapping[str, Any] | None) -> str:
    if not params:
        return path
    parts = [f"{k}={params[k]}" for k in sorted(params)]
    return f"{path}?{'&'.join(parts)}"


@dataclass
class ResponseCache:
    """
    In-memory freshness cache for upstream JSON bodies.

    Each entry is stored with the max age requested by the caller; a lookup
    older than that is a miss and evicts the entry.
    """

    max_entries: int = 512
    _monotonic: Any = field(default=time.monotonic, repr=False)
    _entries: dict[str, tuple[float, float, Any]] = field(default_factory=dict, repr=False)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, max_age_s, value = entry
        if float(self._monotonic()) - stored_at > max_age_s:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, *, max_age_s: float) -> None:
        if max_age_s <= 0:
            return
        if len(self._entries) >= self.max_entries and key not in self._entries:
            # Drop the oldest insertion.
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[key] = (float(self._monotonic()), max_age_s, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

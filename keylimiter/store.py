"""Thread-safe per-key request counters."""

from __future__ import annotations

import threading
from collections.abc import Callable

DEFAULT_STRIPES = 64


class CounterStore:
    """Per-key non-negative counters guarded by a striped lock table.

    Each key maps to one of ``stripes`` locks, so check-and-increment and
    decrement for a given key are serialized while unrelated keys rarely
    contend. A separate registry lock guards creation of new entries and
    key snapshots.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES) -> None:
        if stripes < 1:
            raise ValueError(f"stripes must be at least 1, got {stripes}")
        self._stripes = [threading.Lock() for _ in range(stripes)]
        self._registry_lock = threading.Lock()
        self._counts: dict[str, int] = {}

    def _stripe(self, key: str) -> threading.Lock:
        return self._stripes[hash(key) % len(self._stripes)]

    def get(self, key: str) -> int:
        """Return the current count for *key*, 0 if it was never seen."""
        return self._counts.get(key, 0)

    def try_increment(self, key: str, capacity: int) -> tuple[int, bool]:
        """Atomically admit one request for *key* if it is below *capacity*.

        Returns ``(count, admitted)``. A denial leaves the count untouched.
        """
        with self._stripe(key):
            count = self._counts.get(key)
            if count is None:
                with self._registry_lock:
                    self._counts[key] = 0
                count = 0
            if count >= capacity:
                return count, False
            count += 1
            self._counts[key] = count
            return count, True

    def decrement_if_positive(self, key: str) -> tuple[int, bool]:
        """Lower the count for *key* by one unless it is already 0.

        Returns ``(count, decremented)``. A count of 0 is left untouched.
        """
        with self._stripe(key):
            count = self._counts.get(key, 0)
            if count <= 0:
                return 0, False
            count -= 1
            self._counts[key] = count
            return count, True

    def keys(self) -> list[str]:
        with self._registry_lock:
            return list(self._counts)

    def for_each(self, visit: Callable[[str, int], None]) -> None:
        """Call ``visit(key, count)`` once per key known when enumeration starts."""
        for key in self.keys():
            visit(key, self.get(key))

    def snapshot(self) -> dict[str, int]:
        return {key: self.get(key) for key in self.keys()}

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

"""Time-bounded read-through cache for reference lookups (customers, projects)."""

import time
from typing import Callable, Generic, Optional, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    Holds one value with the time it was fetched.
    On expiry the loader rebuilds the whole value and it replaces the old one
    in a single assignment; readers never see a half-built map.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[tuple[V, float]] = None

    def get(self) -> Optional[V]:
        """Current value if still fresh, else None."""
        entry = self._entry
        if entry is None:
            return None
        value, fetched_at = entry
        if self._clock() - fetched_at >= self.ttl:
            return None
        return value

    def get_or_load(self, loader: Callable[[], V]) -> V:
        """Fresh value, loading and storing a new one when expired or empty."""
        value = self.get()
        if value is not None:
            return value
        value = loader()
        self._entry = (value, self._clock())
        return value

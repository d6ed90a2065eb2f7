"""In-memory, time-boxed cache for Fair Work API responses."""
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_FAILURE_BACKOFF_SECONDS = 60


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    stored_at: float


class RateCache:
    """
    Entries are kept after they expire so a failed refresh can still fall back
    to the last known value. Failed fetches are remembered for
    failure_backoff_seconds so callers can skip the remote until then.
    `clock` returns seconds and is swappable in tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        failure_backoff_seconds: float = DEFAULT_FAILURE_BACKOFF_SECONDS,
    ):
        self.ttl_seconds = ttl_seconds
        self.failure_backoff_seconds = failure_backoff_seconds
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}
        self._failures: dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        """Returns the entry for key, fresh or expired."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: Hashable, data: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=data, stored_at=self._clock())
            self._failures.pop(key, None)

    def is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def get_fresh(self, key: Hashable) -> Optional[Any]:
        entry = self.get(key)
        if entry is None or self.is_expired(entry):
            return None
        return entry.data

    def record_failure(self, key: Hashable) -> None:
        with self._lock:
            self._failures[key] = self._clock()

    def in_backoff(self, key: Hashable) -> bool:
        with self._lock:
            failed_at = self._failures.get(key)
        return failed_at is not None and self._clock() - failed_at < self.failure_backoff_seconds

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._failures.clear()

    def __len__(self) -> int:
        return len(self._entries)

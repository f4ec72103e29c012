"""
In-memory key-value store adapter - Implements KeyValueStore protocol.

Process-local store with per-key absolute expiry, used for development and
tests. Expired entries are dropped lazily on access.
"""

import fnmatch
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Entry:
    value: str
    expires_at: datetime


class InMemoryKeyValueStore:
    """
    Implements KeyValueStore protocol with a dict guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str, expires_at: datetime) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def compare_and_set(self, key: str, expected: str, value: str, expires_at: datetime) -> bool:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None or entry.value != expected:
                return False
            self._entries[key] = _Entry(value=value, expires_at=expires_at)
            return True

    def keys(self, pattern: str) -> list[str]:
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
            return [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry

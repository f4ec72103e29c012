"""
Registration session store - read-modify-write over the key-value port.

One key per session: ``{prefix}{session_id}``. Every write re-applies the
session's original ``expires_at`` so total lifetime is capped at creation,
no matter how many operations touch the session.

Updates are conditional: the new value is written only if the stored value
is still the one the caller read (compare-and-set). A lost race surfaces as
ConcurrentSessionUpdate instead of silently overwriting the winner.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from .exceptions import ConcurrentSessionUpdate, SessionNotFound
from .ports import KeyValueStore
from .session import RegistrationSession

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class RegistrationSessionStore:
    """Loads and writes RegistrationSession records."""

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str = "affiliate_registration:",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._prefix = key_prefix
        self._clock = clock

    @property
    def key_pattern(self) -> str:
        return f"{self._prefix}*"

    def key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    def create(self, session: RegistrationSession) -> None:
        """Write a brand new session with its fixed expiry."""
        session.last_updated_at = self._clock()
        self._store.set(self.key(session.session_id), session.to_json(), session.expires_at)
        logger.debug("Stored session %s until %s", session.session_id, session.expires_at)

    def load(self, session_id: str) -> RegistrationSession | None:
        """
        Load a live session.

        Returns None if the key is absent or the record's own expiry has
        passed (expired sessions are indistinguishable from missing ones).
        """
        raw = self._store.get(self.key(session_id))
        if raw is None:
            return None
        return self._decode(raw)

    def load_raw(self, key: str) -> RegistrationSession | None:
        """Load by full store key; undecodable values are skipped."""
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return self._decode(raw)
        except ValueError:
            logger.warning("Skipping undecodable session entry: %s", key)
            return None

    def keys(self) -> list[str]:
        return self._store.keys(self.key_pattern)

    def update(
        self,
        session_id: str,
        mutate: Callable[[RegistrationSession], None],
    ) -> RegistrationSession:
        """
        Read-modify-write a session.

        Fetches the full record, applies ``mutate`` in memory, and writes the
        entire record back with the original absolute expiry.

        Raises:
            SessionNotFound: If the session is missing or expired
            ConcurrentSessionUpdate: If another writer changed it in between
        """
        key = self.key(session_id)
        raw = self._store.get(key)
        if raw is None:
            raise SessionNotFound("Registration session not found or expired")
        session = self._decode(raw)
        if session is None:
            raise SessionNotFound("Registration session not found or expired")

        mutate(session)
        session.version += 1
        session.last_updated_at = self._clock()

        if not self._store.compare_and_set(key, raw, session.to_json(), session.expires_at):
            logger.warning("Concurrent update detected for session %s", session_id)
            raise ConcurrentSessionUpdate("Registration session was modified concurrently")
        return session

    def _decode(self, raw: str) -> RegistrationSession | None:
        session = RegistrationSession.from_json(raw)
        if session.is_expired(self._clock()):
            return None
        return session

"""
Duplicate-session resolver - finds live sessions by scanning the store.

The scan enumerates every key in the registration namespace and decodes each
record, so its cost is linear in the number of live sessions. That is
acceptable because sessions are TTL-bounded and registration volume is low.
"""

import logging
from collections.abc import Iterable, Iterator

from .session import ACTIVE_STATUSES, RegistrationSession, SessionStatus
from .session_store import RegistrationSessionStore

logger = logging.getLogger(__name__)


class DuplicateSessionResolver:
    """Locates existing registration sessions without a side index."""

    def __init__(self, sessions: RegistrationSessionStore) -> None:
        self._sessions = sessions

    def find_active(self, email: str) -> RegistrationSession | None:
        """
        Return the most recent non-terminal session for ``email``.

        Non-terminal means staged, email_verified or affiliate_pending.
        Matching is on the normalized (stripped, lowercased) address.
        """
        normalized = email.strip().lower()
        matches = [
            session
            for session in self._scan()
            if session.email == normalized and session.status in ACTIVE_STATUSES
        ]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "Found %d active sessions for one contact address, using the newest",
                len(matches),
            )
        return max(matches, key=lambda s: s.created_at)

    def list_by_status(self, statuses: Iterable[SessionStatus]) -> list[RegistrationSession]:
        """Return live sessions in any of ``statuses``, newest first."""
        wanted = set(statuses)
        found = [session for session in self._scan() if session.status in wanted]
        return sorted(found, key=lambda s: s.created_at, reverse=True)

    def _scan(self) -> Iterator[RegistrationSession]:
        for key in self._sessions.keys():
            session = self._sessions.load_raw(key)
            if session is not None:
                yield session

"""
Token generation for registration sessions.

Session ids and verification tokens come from the ``secrets`` module.
Decision tokens are self-locating: ``{action}_{session_id}_{mint_ms}``, so the
owning session can be recovered from the token text alone. Reviewer links
carry a shorter URL form with the action prefix dropped; both forms are
accepted.
"""

import re
import secrets
import time

from .ports import ApprovalAction

SESSION_ID_PREFIX = "aff"

_DECISION_TOKEN = re.compile(
    r"^(?:(?P<action>approve|reject)_)?"
    r"(?P<session_id>" + SESSION_ID_PREFIX + r"_\d+_[0-9a-f]+)"
    r"_(?P<minted>\d+)$"
)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenGenerator:
    """Mints session ids and registration secrets."""

    def __init__(self, verification_token_length: int = 64) -> None:
        if verification_token_length <= 0 or verification_token_length % 2:
            raise ValueError("verification_token_length must be a positive even number")
        self._verification_token_length = verification_token_length

    def new_session_id(self) -> str:
        """Timestamp plus random suffix, e.g. ``aff_1718000000000_9f86d081884c7d65``."""
        return f"{SESSION_ID_PREFIX}_{_now_ms()}_{secrets.token_hex(8)}"

    def new_verification_token(self) -> str:
        """Fixed-length hex string from a cryptographically secure source."""
        return secrets.token_hex(self._verification_token_length // 2)

    def new_decision_token(self, action: ApprovalAction, session_id: str) -> str:
        return f"{action.value}_{session_id}_{_now_ms()}"


def url_token(token: str) -> str:
    """Shortened URL form of a decision token (action prefix dropped)."""
    for action in ApprovalAction:
        prefix = f"{action.value}_"
        if token.startswith(prefix):
            return token[len(prefix) :]
    return token


def parse_decision_token(token: str) -> str | None:
    """
    Recover the session id embedded in a decision token.

    Accepts ``approve_<session_id>_<ms>``, ``reject_<session_id>_<ms>`` and the
    URL form ``<session_id>_<ms>``.

    Returns:
        The session id, or None if the token does not parse
    """
    match = _DECISION_TOKEN.match(token.strip())
    if match is None:
        return None
    return match.group("session_id")


def token_matches(expected: str | None, presented: str) -> bool:
    """
    Suffix match of ``presented`` against the stored token.

    The full token and its URL form both match. The tail comparison is
    constant-time.
    """
    if not expected or not presented or len(presented) > len(expected):
        return False
    tail = expected[len(expected) - len(presented) :]
    return secrets.compare_digest(tail.encode(), presented.encode())

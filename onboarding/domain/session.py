"""
Registration session - serializable state for one registration attempt.

Session Lifecycle (forward-only)
================================

    staged -> email_verified -> affiliate_pending -> admin_approved -> completed
                                                  -> admin_rejected -> completed

Every state may lapse into ``expired`` when the store TTL runs out. That state
is never written: an expired session is simply absent from the store.

``entity_id`` is set exactly once, on the email_verified -> affiliate_pending
edge, and is present for every status from affiliate_pending onwards.
"""

import json
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    """Registration session states."""

    STAGED = "staged"
    EMAIL_VERIFIED = "email_verified"
    AFFILIATE_PENDING = "affiliate_pending"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    COMPLETED = "completed"
    EXPIRED = "expired"


# Sessions that still block a new registration for the same contact address
ACTIVE_STATUSES = frozenset(
    {SessionStatus.STAGED, SessionStatus.EMAIL_VERIFIED, SessionStatus.AFFILIATE_PENDING}
)

# Sessions that own a durable affiliate record
ENTITY_STATUSES = frozenset(
    {
        SessionStatus.AFFILIATE_PENDING,
        SessionStatus.ADMIN_APPROVED,
        SessionStatus.ADMIN_REJECTED,
        SessionStatus.COMPLETED,
    }
)

TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.STAGED: frozenset({SessionStatus.EMAIL_VERIFIED, SessionStatus.EXPIRED}),
    SessionStatus.EMAIL_VERIFIED: frozenset(
        {SessionStatus.AFFILIATE_PENDING, SessionStatus.EXPIRED}
    ),
    SessionStatus.AFFILIATE_PENDING: frozenset(
        {SessionStatus.ADMIN_APPROVED, SessionStatus.ADMIN_REJECTED, SessionStatus.EXPIRED}
    ),
    SessionStatus.ADMIN_APPROVED: frozenset({SessionStatus.COMPLETED, SessionStatus.EXPIRED}),
    SessionStatus.ADMIN_REJECTED: frozenset({SessionStatus.COMPLETED, SessionStatus.EXPIRED}),
    SessionStatus.COMPLETED: frozenset({SessionStatus.EXPIRED}),
    SessionStatus.EXPIRED: frozenset(),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """Return True if ``current -> target`` is an edge of the lifecycle."""
    return target in TRANSITIONS[current]


_DATETIME_FIELDS = (
    "created_at",
    "expires_at",
    "last_updated_at",
    "email_verified_at",
    "entity_created_at",
    "decided_at",
)


@dataclass
class RegistrationSession:
    """
    State container tracking one registration attempt end-to-end.

    ``applicant_payload`` holds the registration form verbatim until the
    durable record exists. ``expires_at`` is fixed at creation and re-applied
    on every write.
    """

    session_id: str
    applicant_payload: dict[str, Any]
    verification_token: str
    max_verification_attempts: int
    created_at: datetime
    expires_at: datetime
    status: SessionStatus = SessionStatus.STAGED
    verification_attempts: int = 0
    verification_resends: int = 0
    email_verified_at: datetime | None = None

    # Durable record
    entity_id: str | None = None
    entity_created_at: datetime | None = None

    # Reviewer decision secrets
    approval_token: str | None = None
    rejection_token: str | None = None

    # Notification flags (observability only, never gate a transition)
    reviewer_notification_sent: bool = False
    pending_notification_sent: bool = False
    outcome_notification_sent: bool = False

    # Decision metadata, written once
    decision: str | None = None
    decided_by: str | None = None
    decision_reason: str | None = None
    decided_at: datetime | None = None

    last_updated_at: datetime | None = None
    version: int = 0

    @property
    def email(self) -> str:
        """Normalized contact address of the applicant."""
        return str(self.applicant_payload.get("email", "")).strip().lower()

    @property
    def attempts_exhausted(self) -> bool:
        return self.verification_attempts >= self.max_verification_attempts

    @property
    def attempts_remaining(self) -> int:
        return max(self.max_verification_attempts - self.verification_attempts, 0)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def advance(self, target: SessionStatus) -> None:
        """
        Move to ``target`` status.

        Raises:
            ValueError: If ``target`` is not reachable from the current status,
                or requires a durable affiliate the session does not have
        """
        if not can_transition(self.status, target):
            raise ValueError(f"Illegal transition {self.status.value} -> {target.value}")
        if target in ENTITY_STATUSES and self.entity_id is None:
            raise ValueError(f"Status {target.value} requires an entity_id")
        self.status = target

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        for name in _DATETIME_FIELDS:
            value = data[name]
            data[name] = value.isoformat() if value is not None else None
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegistrationSession":
        """
        Build a session from its serialized form.

        Unknown keys are ignored so older records stay readable.

        Raises:
            ValueError: If required fields are missing or malformed
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        try:
            values["status"] = SessionStatus(values.get("status", SessionStatus.STAGED.value))
            for name in _DATETIME_FIELDS:
                if values.get(name) is not None:
                    values[name] = datetime.fromisoformat(values[name])
            return cls(**values)
        except (TypeError, KeyError) as e:
            raise ValueError(f"Malformed registration session: {e}") from e

    @classmethod
    def from_json(cls, raw: str) -> "RegistrationSession":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Registration session must be a JSON object")
        return cls.from_dict(data)

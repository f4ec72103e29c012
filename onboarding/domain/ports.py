"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class ApprovalAction(str, Enum):
    """Reviewer decision on a pending registration."""

    APPROVE = "approve"
    REJECT = "reject"


class AccountStatus(str, Enum):
    """Status of the durable affiliate record."""

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Privilege(str, Enum):
    """Account privilege, lowest first."""

    OWNER = "owner"
    ADMIN = "admin"
    MAIN = "main"


class AccessModifier(str, Enum):
    """Profile visibility."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class NotificationOutcome(Enum):
    """Result of a best-effort notification attempt."""

    SENT = "sent"
    FAILED = "failed"


class KeyValueStore(Protocol):
    """
    Port interface for the shared session store.

    Every key carries an absolute expiry. Expired keys are invisible to
    get/keys/compare_and_set.
    """

    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None if missing or expired."""
        ...

    def set(self, key: str, value: str, expires_at: datetime) -> None:
        """Store ``value`` under ``key`` until ``expires_at``."""
        ...

    def compare_and_set(self, key: str, expected: str, value: str, expires_at: datetime) -> bool:
        """
        Atomically replace the value if it still equals ``expected``.

        Returns:
            True if the value was replaced, False if the key changed or lapsed
        """
        ...

    def keys(self, pattern: str) -> list[str]:
        """Return live keys matching a glob ``pattern`` (``*`` and ``?``)."""
        ...


class AffiliateRepository(Protocol):
    """Port interface for durable affiliate persistence."""

    def email_exists(self, email: str) -> bool:
        """Return True if a durable affiliate already owns ``email``."""
        ...

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a durable affiliate and return it (including ``id``)."""
        ...

    def update(self, affiliate_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update system fields of an affiliate and return the new record."""
        ...

    def get(self, affiliate_id: str) -> dict[str, Any] | None:
        """Return an affiliate by id, or None."""
        ...


class NotificationSender(Protocol):
    """Port interface for templated notification delivery."""

    def send(self, recipient: str, template_name: str, data: dict[str, Any]) -> bool:
        """
        Deliver a templated notification.

        Returns:
            True if the message was accepted for delivery
        """
        ...


class BusinessRuleValidator(Protocol):
    """Port interface for registration business rules."""

    def validate(self, payload: dict[str, Any]) -> None:
        """
        Validate a registration payload.

        Raises:
            BusinessRuleViolation: With a caller-facing message
        """
        ...

"""
Domain exceptions - Semantic error types for affiliate registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Classified errors (everything except RegistrationFailed) are raised as-is
through the orchestrator. Unexpected lower-level failures are wrapped into
RegistrationFailed at the orchestrator boundary.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class InvalidRegistrationData(RegistrationError):
    """Malformed registration payload or token."""

    pass


class BusinessRuleViolation(RegistrationError):
    """Registration rejected by the business-rule validator.

    The message is surfaced to callers verbatim.
    """

    pass


class RegistrationConflict(RegistrationError):
    """Contact address already owns a durable affiliate record."""

    pass


class ConcurrentSessionUpdate(RegistrationError):
    """Session changed between read and write (lost compare-and-set)."""

    pass


class SessionNotFound(RegistrationError):
    """Session missing, expired, or no session matches the token."""

    pass


class InvalidSessionState(RegistrationError):
    """Operation not available for the session's current status."""

    def __init__(self, operation: str, status: str) -> None:
        super().__init__(f"{operation} not available for status: {status}")
        self.operation = operation
        self.status = status


class InvalidVerificationToken(RegistrationError):
    """Verification token does not match; attempt was counted."""

    def __init__(self, attempts_remaining: int) -> None:
        super().__init__("Invalid verification token")
        self.attempts_remaining = attempts_remaining


class VerificationAttemptsExhausted(RegistrationError):
    """Maximum verification attempts reached; session can no longer verify."""

    pass


class ResendLimitReached(RegistrationError):
    """Verification email was resent too many times for this session."""

    pass


class RegistrationFailed(RegistrationError):
    """Unexpected failure wrapped at the orchestrator boundary."""

    pass

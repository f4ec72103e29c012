"""
Domain layer - Pure business logic with zero framework imports.

This package contains the affiliate registration workflow: the session
state machine, token generation, the session store contract and the
duplicate-session resolver. It defines its own port interfaces for
infrastructure abstraction.
"""

from .exceptions import (
    BusinessRuleViolation,
    ConcurrentSessionUpdate,
    InvalidRegistrationData,
    InvalidSessionState,
    InvalidVerificationToken,
    RegistrationConflict,
    RegistrationError,
    RegistrationFailed,
    ResendLimitReached,
    SessionNotFound,
    VerificationAttemptsExhausted,
)
from .ports import (
    AccessModifier,
    AccountStatus,
    AffiliateRepository,
    ApprovalAction,
    BusinessRuleValidator,
    KeyValueStore,
    NotificationOutcome,
    NotificationSender,
    Privilege,
)
from .registration import ApprovalResult, RegistrationService, StageResult, VerificationResult
from .resolver import DuplicateSessionResolver
from .session import RegistrationSession, SessionStatus
from .session_store import RegistrationSessionStore
from .tokens import TokenGenerator

__all__ = [
    "AccessModifier",
    "AccountStatus",
    "AffiliateRepository",
    "ApprovalAction",
    "ApprovalResult",
    "BusinessRuleValidator",
    "BusinessRuleViolation",
    "ConcurrentSessionUpdate",
    "DuplicateSessionResolver",
    "InvalidRegistrationData",
    "InvalidSessionState",
    "InvalidVerificationToken",
    "KeyValueStore",
    "NotificationOutcome",
    "NotificationSender",
    "Privilege",
    "RegistrationConflict",
    "RegistrationError",
    "RegistrationFailed",
    "RegistrationService",
    "RegistrationSession",
    "RegistrationSessionStore",
    "ResendLimitReached",
    "SessionNotFound",
    "SessionStatus",
    "StageResult",
    "TokenGenerator",
    "VerificationAttemptsExhausted",
    "VerificationResult",
]

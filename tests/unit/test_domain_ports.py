"""
Unit tests for domain ports, enums and exceptions.

Tests verify:
- Port enums carry the stored string values
- Adapters satisfy the ports structurally
- Exception hierarchy and messages
- Domain purity (no framework imports)
"""

import json
import subprocess
from pathlib import Path

import pytest

from onboarding.adapters.kv.memory import InMemoryKeyValueStore
from onboarding.adapters.kv.postgres import PostgresKeyValueStore
from onboarding.adapters.repository.memory import InMemoryAffiliateRepository
from onboarding.adapters.repository.postgres import PostgresAffiliateRepository
from onboarding.adapters.smtp.console import ConsoleNotificationSender
from onboarding.domain.exceptions import (
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
from onboarding.domain.ports import (
    AccessModifier,
    AccountStatus,
    AffiliateRepository,
    ApprovalAction,
    KeyValueStore,
    NotificationSender,
    Privilege,
)

DOMAIN_DIR = Path(__file__).resolve().parents[2] / "onboarding" / "domain"


class TestPortEnums:
    """Tests for enums shared with the durable record."""

    def test_approval_actions(self) -> None:
        assert [a.value for a in ApprovalAction] == ["approve", "reject"]

    def test_account_status_values(self) -> None:
        assert {s.value for s in AccountStatus} == {"pending", "active", "inactive"}

    def test_privilege_lowest_first(self) -> None:
        """The first privilege is the system default for new affiliates."""
        assert list(Privilege)[0] == Privilege.OWNER

    def test_access_modifier_values(self) -> None:
        assert AccessModifier.PRIVATE == "private"

    def test_enums_json_serializable(self) -> None:
        assert json.dumps({"status": AccountStatus.PENDING}) == '{"status": "pending"}'


class TestStructuralSubtyping:
    """Adapters implement ports without inheriting from them."""

    @pytest.mark.parametrize(
        ("adapter", "methods"),
        [
            (InMemoryKeyValueStore, ("get", "set", "compare_and_set", "keys")),
            (PostgresKeyValueStore, ("get", "set", "compare_and_set", "keys")),
            (InMemoryAffiliateRepository, ("email_exists", "create", "update", "get")),
            (PostgresAffiliateRepository, ("email_exists", "create", "update", "get")),
            (ConsoleNotificationSender, ("send",)),
        ],
    )
    def test_adapter_has_port_methods(self, adapter: type, methods: tuple[str, ...]) -> None:
        for name in methods:
            assert callable(getattr(adapter, name))
        assert adapter.__bases__ == (object,)

    def test_ports_are_protocols(self) -> None:
        for port in (KeyValueStore, AffiliateRepository, NotificationSender):
            assert getattr(port, "_is_protocol", False)


class TestExceptions:
    """Tests for the domain exception hierarchy."""

    @pytest.mark.parametrize(
        "error_type",
        [
            InvalidRegistrationData,
            BusinessRuleViolation,
            RegistrationConflict,
            ConcurrentSessionUpdate,
            SessionNotFound,
            VerificationAttemptsExhausted,
            ResendLimitReached,
            RegistrationFailed,
        ],
    )
    def test_inherits_registration_error(self, error_type: type) -> None:
        assert issubclass(error_type, RegistrationError)

    def test_invalid_session_state_message(self) -> None:
        error = InvalidSessionState("Approval", "staged")
        assert str(error) == "Approval not available for status: staged"
        assert error.operation == "Approval"
        assert error.status == "staged"

    def test_invalid_token_carries_remaining_attempts(self) -> None:
        error = InvalidVerificationToken(attempts_remaining=1)
        assert str(error) == "Invalid verification token"
        assert error.attempts_remaining == 1


class TestDomainPurity:
    """Domain layer has zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
            "import bcrypt",
        ],
    )
    def test_no_framework_imports(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, str(DOMAIN_DIR)],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"

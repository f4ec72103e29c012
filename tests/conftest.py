"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- In-memory session store and affiliate repository
- A mocked notification sender
- A fully wired RegistrationService
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import Mock

import pytest

from onboarding.adapters.kv.memory import InMemoryKeyValueStore
from onboarding.adapters.repository.memory import InMemoryAffiliateRepository
from onboarding.domain.registration import RegistrationService
from onboarding.domain.session_store import RegistrationSessionStore


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 5, 12, 0, tzinfo=UTC))


@pytest.fixture
def kv_store(clock: FrozenClock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def sessions(kv_store: InMemoryKeyValueStore, clock: FrozenClock) -> RegistrationSessionStore:
    return RegistrationSessionStore(kv_store, clock=clock)


@pytest.fixture
def affiliates() -> InMemoryAffiliateRepository:
    return InMemoryAffiliateRepository()


@pytest.fixture
def notifier() -> Mock:
    sender = Mock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def service(
    sessions: RegistrationSessionStore,
    affiliates: InMemoryAffiliateRepository,
    notifier: Mock,
    clock: FrozenClock,
) -> RegistrationService:
    return RegistrationService(
        sessions=sessions,
        affiliates=affiliates,
        notifier=notifier,
        reviewer_emails=["reviewer@example.org"],
        frontend_url="https://portal.example.org",
        clock=clock,
    )


@pytest.fixture
def payload() -> dict[str, Any]:
    """A complete, valid registration payload."""
    return {
        "organization_name": "Example Clinic",
        "email": "a@x.org",
        "password": "correct-horse-battery",
        "representative_first_name": "Sam",
        "representative_last_name": "Rivera",
        "representative_job_title": "Director",
        "phone": "555-0100",
        "city": "Toronto",
    }

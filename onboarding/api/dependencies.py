"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Header, Request

from onboarding.adapters.smtp.console import ConsoleNotificationSender
from onboarding.config.settings import get_settings
from onboarding.domain.ports import AffiliateRepository, KeyValueStore, NotificationSender
from onboarding.domain.registration import RegistrationService
from onboarding.domain.session_store import RegistrationSessionStore
from onboarding.domain.tokens import TokenGenerator

# Module-level singleton - ConsoleNotificationSender is stateless
_notification_sender = ConsoleNotificationSender()


def get_key_value_store(request: Request) -> KeyValueStore:
    """
    Get the session key-value store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.kv_store


def get_affiliate_repository(request: Request) -> AffiliateRepository:
    """Get the durable affiliate repository from app state."""
    return request.app.state.affiliates


def get_notification_sender() -> ConsoleNotificationSender:
    """Get console notification sender (singleton)."""
    return _notification_sender


def get_registration_service(
    request: Request,
    notifier: NotificationSender = Depends(get_notification_sender),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the session store, affiliate repository and
    notification sender for the domain service.
    """
    settings = get_settings()
    sessions = RegistrationSessionStore(
        get_key_value_store(request), key_prefix=settings.session_key_prefix
    )
    return RegistrationService(
        sessions=sessions,
        affiliates=get_affiliate_repository(request),
        notifier=notifier,
        tokens=TokenGenerator(settings.verification_token_length),
        reviewer_emails=settings.reviewer_email_list,
        frontend_url=settings.frontend_url,
        session_ttl=timedelta(hours=settings.session_ttl_hours),
        max_verification_attempts=settings.max_verification_attempts,
        max_verification_resends=settings.max_verification_resends,
    )


def get_reviewer_id(
    x_reviewer_id: str = Header(..., min_length=1, description="Id of the reviewing admin"),
) -> str:
    """
    Extract the reviewer id set by the authentication layer.

    Authentication itself happens upstream; this only reads the header.
    """
    return x_reviewer_id.strip()

"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from onboarding.domain.session import RegistrationSession


class StageRegistrationRequest(BaseModel):
    """Request model for staging an affiliate registration."""

    organization_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Account password (min 8 characters)")
    representative_first_name: str = Field(..., min_length=1, max_length=100)
    representative_last_name: str = Field(..., min_length=1, max_length=100)
    representative_job_title: str | None = Field(default=None, max_length=100)
    area: int | None = Field(default=None, ge=1, description="Business area id")
    phone: str | None = Field(default=None, max_length=30)
    website: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    province: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)


class StageRegistrationResponse(BaseModel):
    """Response model for a staged (or resumed) registration."""

    session_id: str
    status: str
    next_step: str
    expires_at: datetime
    verification_email_sent: bool
    message: str


class VerifyEmailRequest(BaseModel):
    """Request model for email verification."""

    session_id: str = Field(..., min_length=1, max_length=100)
    token: str = Field(..., min_length=1, max_length=256, description="Email verification token")


class VerifyEmailResponse(BaseModel):
    """Response model for successful email verification."""

    session_id: str
    status: str
    entity_id: str | None = None
    next_step: str
    reviewer_notification_sent: bool
    message: str


class ApprovalRequest(BaseModel):
    """Request model for a reviewer decision."""

    action: Literal["approve", "reject"]
    reason: str | None = Field(default=None, max_length=1000)


class ApprovalResponse(BaseModel):
    """Response model for a processed reviewer decision."""

    session_id: str
    status: str
    action: str
    processed_at: datetime
    entity_id: str | None = None
    already_processed: bool = False
    message: str


class ResendVerificationRequest(BaseModel):
    """Request model for resending the verification email."""

    session_id: str = Field(..., min_length=1, max_length=100)


class SessionSnapshot(BaseModel):
    """
    Registration session as exposed over HTTP.

    Secrets (verification and decision tokens) and the applicant password
    are never included.
    """

    session_id: str
    status: str
    organization_name: str | None = None
    email: str
    verification_attempts: int
    max_verification_attempts: int
    email_verified_at: datetime | None = None
    entity_id: str | None = None
    reviewer_notification_sent: bool
    pending_notification_sent: bool
    outcome_notification_sent: bool
    decision: str | None = None
    decided_by: str | None = None
    decision_reason: str | None = None
    decided_at: datetime | None = None
    created_at: datetime
    last_updated_at: datetime | None = None
    expires_at: datetime

    @classmethod
    def from_session(cls, session: RegistrationSession) -> "SessionSnapshot":
        return cls(
            session_id=session.session_id,
            status=session.status.value,
            organization_name=session.applicant_payload.get("organization_name"),
            email=session.email,
            verification_attempts=session.verification_attempts,
            max_verification_attempts=session.max_verification_attempts,
            email_verified_at=session.email_verified_at,
            entity_id=session.entity_id,
            reviewer_notification_sent=session.reviewer_notification_sent,
            pending_notification_sent=session.pending_notification_sent,
            outcome_notification_sent=session.outcome_notification_sent,
            decision=session.decision,
            decided_by=session.decided_by,
            decision_reason=session.decision_reason,
            decided_at=session.decided_at,
            created_at=session.created_at,
            last_updated_at=session.last_updated_at,
            expires_at=session.expires_at,
        )


class PendingRegistrationsResponse(BaseModel):
    """Sessions awaiting a reviewer decision."""

    count: int
    registrations: list[SessionSnapshot]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str

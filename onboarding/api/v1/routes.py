"""
API v1 routes.

Defines REST endpoints for the affiliate registration workflow:
- POST /v1/affiliates/stage - Stage a registration, send verification email
- POST /v1/affiliates/verify-email - Verify contact address, create affiliate
- POST /v1/affiliates/approve/{token} - Reviewer approval or rejection
- GET  /v1/affiliates/status/{session_id} - Session snapshot
- POST /v1/affiliates/resend-verification - Resend verification email
- GET  /v1/affiliates/pending - Registrations awaiting review
"""

from fastapi import APIRouter, Depends, HTTPException, status

from onboarding.api.dependencies import get_registration_service, get_reviewer_id
from onboarding.api.models import (
    ApprovalRequest,
    ApprovalResponse,
    ErrorResponse,
    PendingRegistrationsResponse,
    ResendVerificationRequest,
    SessionSnapshot,
    StageRegistrationRequest,
    StageRegistrationResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from onboarding.domain.exceptions import (
    ConcurrentSessionUpdate,
    RegistrationConflict,
    RegistrationError,
    RegistrationFailed,
    ResendLimitReached,
    SessionNotFound,
)
from onboarding.domain.registration import RegistrationService, StageResult

router = APIRouter(prefix="/affiliates", tags=["v1"])

# First match wins; RegistrationError is the catch-all for classified errors
_ERROR_STATUS: list[tuple[type[RegistrationError], int]] = [
    (SessionNotFound, status.HTTP_404_NOT_FOUND),
    (RegistrationConflict, status.HTTP_409_CONFLICT),
    (ConcurrentSessionUpdate, status.HTTP_409_CONFLICT),
    (ResendLimitReached, status.HTTP_429_TOO_MANY_REQUESTS),
    (RegistrationFailed, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (RegistrationError, status.HTTP_400_BAD_REQUEST),
]


def to_http_error(error: RegistrationError) -> HTTPException:
    """Translate a domain error into an HTTPException."""
    # RegistrationError closes the table, so every domain error matches
    status_code = next(code for error_type, code in _ERROR_STATUS if isinstance(error, error_type))
    if isinstance(error, RegistrationFailed):
        return HTTPException(status_code=status_code, detail="Registration processing failed")
    return HTTPException(status_code=status_code, detail=str(error))


def _stage_response(result: StageResult) -> StageRegistrationResponse:
    return StageRegistrationResponse(
        session_id=result.session_id,
        status=result.status.value,
        next_step=result.next_step,
        expires_at=result.expires_at,
        verification_email_sent=result.verification_email_sent,
        message=result.message,
    )


@router.post(
    "/stage",
    response_model=StageRegistrationResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse, "description": "Business rule violation"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Stage an affiliate registration",
    description="Stores the registration in a temporary session and sends a verification "
    "email. Staging again for an address that is still awaiting verification resends the "
    "email and returns the same session.",
)
async def stage_registration(
    request_data: StageRegistrationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> StageRegistrationResponse:
    """
    Stage an affiliate registration.

    Does not create a permanent record; that happens at email verification.
    """
    try:
        result = service.stage_registration(request_data.model_dump(exclude_none=True))
    except RegistrationError as e:
        raise to_http_error(e) from None
    return _stage_response(result)


@router.post(
    "/verify-email",
    response_model=VerifyEmailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid token, state or attempts exhausted"},
        404: {"model": ErrorResponse, "description": "Session not found or expired"},
        409: {"model": ErrorResponse, "description": "Concurrent verification"},
    },
    summary="Verify the registration email",
    description="Confirms the contact address, creates the affiliate with pending status "
    "and notifies reviewers.",
)
async def verify_email(
    request_data: VerifyEmailRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyEmailResponse:
    try:
        result = service.verify_email(request_data.session_id, request_data.token)
    except RegistrationError as e:
        raise to_http_error(e) from None
    return VerifyEmailResponse(
        session_id=result.session_id,
        status=result.status.value,
        entity_id=result.entity_id,
        next_step=result.next_step,
        reviewer_notification_sent=result.reviewer_notification_sent,
        message=result.message,
    )


@router.post(
    "/approve/{token}",
    response_model=ApprovalResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Session not awaiting a decision"},
        404: {"model": ErrorResponse, "description": "Invalid or expired approval token"},
        409: {"model": ErrorResponse, "description": "Concurrent decision"},
    },
    summary="Approve or reject a registration",
    description="Processes a reviewer decision using the approval or rejection token "
    "from the reviewer email. Repeating a decision that already took effect succeeds "
    "without side effects.",
)
async def process_approval(
    token: str,
    request_data: ApprovalRequest,
    reviewer_id: str = Depends(get_reviewer_id),
    service: RegistrationService = Depends(get_registration_service),
) -> ApprovalResponse:
    try:
        result = service.process_approval(
            token, request_data.action, reviewer_id, request_data.reason
        )
    except RegistrationError as e:
        raise to_http_error(e) from None
    return ApprovalResponse(
        session_id=result.session_id,
        status=result.status.value,
        action=result.action.value,
        processed_at=result.processed_at,
        entity_id=result.entity_id,
        already_processed=result.already_processed,
        message=result.message,
    )


@router.get(
    "/status/{session_id}",
    response_model=SessionSnapshot,
    responses={404: {"model": ErrorResponse, "description": "Session not found or expired"}},
    summary="Get registration status",
)
async def get_registration_status(
    session_id: str,
    service: RegistrationService = Depends(get_registration_service),
) -> SessionSnapshot:
    try:
        session = service.get_registration_status(session_id)
    except RegistrationError as e:
        raise to_http_error(e) from None
    return SessionSnapshot.from_session(session)


@router.post(
    "/resend-verification",
    response_model=StageRegistrationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Session not awaiting verification"},
        404: {"model": ErrorResponse, "description": "Session not found or expired"},
        429: {"model": ErrorResponse, "description": "Resend limit reached"},
    },
    summary="Resend the verification email",
)
async def resend_verification(
    request_data: ResendVerificationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> StageRegistrationResponse:
    try:
        result = service.resend_verification(request_data.session_id)
    except RegistrationError as e:
        raise to_http_error(e) from None
    return _stage_response(result)


@router.get(
    "/pending",
    response_model=PendingRegistrationsResponse,
    dependencies=[Depends(get_reviewer_id)],
    summary="List registrations awaiting review",
)
async def list_pending_registrations(
    service: RegistrationService = Depends(get_registration_service),
) -> PendingRegistrationsResponse:
    try:
        sessions = service.list_pending_registrations()
    except RegistrationError as e:
        raise to_http_error(e) from None
    snapshots = [SessionSnapshot.from_session(session) for session in sessions]
    return PendingRegistrationsResponse(count=len(snapshots), registrations=snapshots)

"""
Affiliate registration service - staged registration workflow.

This module drives an applicant through contact-address verification and a
reviewer through an approve/reject decision, using the expiring session
store as the only coordination medium.

Registration Workflow
=====================

1. stage_registration()  - validate, de-duplicate, store session, send
                           verification email
2. verify_email()        - check token, create the durable affiliate with
                           system defaults, mint decision tokens, notify
                           reviewers and applicant
3. process_approval()    - resolve session from the decision token, update
                           the durable affiliate, notify applicant, complete

Valid Transitions (forward-only):
    staged            -> email_verified     (token match, attempts < max)
    email_verified    -> affiliate_pending  (durable record created)
    affiliate_pending -> admin_approved     (approval token)
    affiliate_pending -> admin_rejected     (rejection token)
    admin_approved    -> completed          (outcome notification attempted)
    admin_rejected    -> completed          (outcome notification attempted)

Every session write after creation is a compare-and-set, so two racing
verifications (or decisions) cannot both win: the loser sees either a state
guard failure or ConcurrentSessionUpdate before touching the durable store.

Notification failures never fail an operation. They are logged and
recorded as flags on the session.
"""

import functools
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, NoReturn

from .exceptions import (
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
    NotificationOutcome,
    NotificationSender,
    Privilege,
)
from .resolver import DuplicateSessionResolver
from .session import RegistrationSession, SessionStatus
from .session_store import RegistrationSessionStore, utcnow
from .tokens import TokenGenerator, parse_decision_token, token_matches, url_token

logger = logging.getLogger(__name__)

NEXT_STEP_VERIFY_EMAIL = "verify_email"
NEXT_STEP_ADMIN_APPROVAL = "admin_approval"
NEXT_STEP_COMPLETED = "completed"

# Notification templates
TEMPLATE_VERIFICATION = "affiliate-verification"
TEMPLATE_REVIEWER_APPROVAL = "affiliate-admin-approval"
TEMPLATE_PENDING = "affiliate-created-pending"
TEMPLATE_APPROVED = "affiliate-approved-active"
TEMPLATE_REJECTED = "affiliate-rejected-inactive"

_DECIDED_STATUSES = {
    ApprovalAction.APPROVE: SessionStatus.ADMIN_APPROVED,
    ApprovalAction.REJECT: SessionStatus.ADMIN_REJECTED,
}

_OUTCOME_ACCOUNT_STATUS = {
    ApprovalAction.APPROVE: AccountStatus.ACTIVE,
    ApprovalAction.REJECT: AccountStatus.INACTIVE,
}


@dataclass(frozen=True)
class StageResult:
    """Outcome of staging (or re-staging) a registration."""

    session_id: str
    status: SessionStatus
    next_step: str
    expires_at: datetime
    verification_email_sent: bool
    message: str
    resumed: bool = False


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a successful email verification."""

    session_id: str
    status: SessionStatus
    entity_id: str
    next_step: str
    reviewer_notification_sent: bool
    pending_notification_sent: bool
    message: str


@dataclass(frozen=True)
class ApprovalResult:
    """Outcome of a reviewer decision."""

    session_id: str
    entity_id: str | None
    status: SessionStatus
    action: ApprovalAction
    processed_by: str
    processed_at: datetime
    message: str
    reason: str | None = None
    already_processed: bool = False


def _boundary(operation: str) -> Callable:
    """Re-raise classified errors as-is, wrap anything else in RegistrationFailed."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self: "RegistrationService", *args: Any, **kwargs: Any) -> Any:
            try:
                return func(self, *args, **kwargs)
            except RegistrationError as e:
                logger.warning("%s rejected: %s", operation, e)
                raise
            except Exception as e:
                logger.exception("%s failed", operation)
                raise RegistrationFailed(f"{operation} failed") from e

        return wrapper

    return decorator


@dataclass
class RegistrationService:
    """
    Domain service orchestrating affiliate registration.

    Owns the session state machine. Durable persistence and notification
    delivery are external collaborators reached through ports.
    """

    sessions: RegistrationSessionStore
    affiliates: AffiliateRepository
    notifier: NotificationSender
    tokens: TokenGenerator = field(default_factory=TokenGenerator)
    rules: BusinessRuleValidator | None = None
    reviewer_emails: list[str] = field(default_factory=list)
    frontend_url: str = "http://localhost:3000"
    session_ttl: timedelta = timedelta(hours=72)
    max_verification_attempts: int = 3
    max_verification_resends: int = 10
    clock: Callable[[], datetime] = utcnow
    resolver: DuplicateSessionResolver | None = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = DuplicateSessionResolver(self.sessions)

    # ------------------------------------------------------------------
    # Stage 1: staging
    # ------------------------------------------------------------------

    @_boundary("Registration staging")
    def stage_registration(self, payload: dict[str, Any]) -> StageResult:
        """
        Stage a registration and send the verification email.

        Idempotent for a contact address whose session is still staged: the
        verification email is resent for that session and its ids returned;
        these resends count against the per-session resend bound.
        A session awaiting review is returned as-is without any side effect.

        Raises:
            InvalidRegistrationData: Missing or malformed contact address
            BusinessRuleViolation: Rejected by the business-rule validator
            RegistrationConflict: Address already owns a durable affiliate
        """
        email = self._normalize_email(payload.get("email"))

        if self.rules is not None:
            self.rules.validate(payload)

        if self.affiliates.email_exists(email):
            raise RegistrationConflict("Email address is already registered with another affiliate")

        existing = self.resolver.find_active(email)
        if existing is not None:
            logger.info(
                "Active registration session %s already exists (status: %s)",
                existing.session_id,
                existing.status.value,
            )
            if existing.status == SessionStatus.STAGED:
                return self._restage(existing)
            if existing.status == SessionStatus.AFFILIATE_PENDING:
                return StageResult(
                    session_id=existing.session_id,
                    status=existing.status,
                    next_step=NEXT_STEP_ADMIN_APPROVAL,
                    expires_at=existing.expires_at,
                    verification_email_sent=False,
                    message="Registration already in progress, awaiting reviewer approval",
                    resumed=True,
                )
            logger.info(
                "Session %s has status %s, starting a new registration",
                existing.session_id,
                existing.status.value,
            )

        now = self.clock()
        session = RegistrationSession(
            session_id=self.tokens.new_session_id(),
            applicant_payload=dict(payload),
            verification_token=self.tokens.new_verification_token(),
            max_verification_attempts=self.max_verification_attempts,
            created_at=now,
            expires_at=now + self.session_ttl,
        )
        self.sessions.create(session)
        logger.info("Registration session %s staged", session.session_id)

        outcome = self._send_verification(session)
        return StageResult(
            session_id=session.session_id,
            status=session.status,
            next_step=NEXT_STEP_VERIFY_EMAIL,
            expires_at=session.expires_at,
            verification_email_sent=outcome is NotificationOutcome.SENT,
            message="Affiliate registration staged successfully",
        )

    def _restage(self, existing: RegistrationSession) -> StageResult:
        """Resend verification for a still-staged session, within the resend bound."""

        def count_resend(current: RegistrationSession) -> None:
            if current.status != SessionStatus.STAGED:
                raise InvalidSessionState("Registration staging", current.status.value)
            if current.verification_resends >= self.max_verification_resends:
                raise ResendLimitReached("Maximum verification email resends exceeded")
            current.verification_resends += 1

        try:
            session = self.sessions.update(existing.session_id, count_resend)
        except ResendLimitReached:
            logger.warning(
                "Resend limit reached for session %s, verification email not sent",
                existing.session_id,
            )
            session, sent = existing, False
            message = "Registration already staged; verification email resend limit reached"
        else:
            sent = self._send_verification(session) is NotificationOutcome.SENT
            message = "Verification email resent to existing registration session"

        return StageResult(
            session_id=session.session_id,
            status=session.status,
            next_step=NEXT_STEP_VERIFY_EMAIL,
            expires_at=session.expires_at,
            verification_email_sent=sent,
            message=message,
            resumed=True,
        )

    @_boundary("Verification resend")
    def resend_verification(self, session_id: str) -> StageResult:
        """
        Resend the verification email for a staged session.

        Raises:
            SessionNotFound: Session missing or expired
            InvalidSessionState: Session is no longer staged
            VerificationAttemptsExhausted: Verification is blocked
            ResendLimitReached: Too many resends for this session
        """

        def count_resend(session: RegistrationSession) -> None:
            self._check_verifiable(session)
            if session.verification_resends >= self.max_verification_resends:
                raise ResendLimitReached("Maximum verification email resends exceeded")
            session.verification_resends += 1

        session = self.sessions.update(session_id, count_resend)
        outcome = self._send_verification(session)
        return StageResult(
            session_id=session.session_id,
            status=session.status,
            next_step=NEXT_STEP_VERIFY_EMAIL,
            expires_at=session.expires_at,
            verification_email_sent=outcome is NotificationOutcome.SENT,
            message="Verification email resent",
            resumed=True,
        )

    # ------------------------------------------------------------------
    # Stage 2: email verification
    # ------------------------------------------------------------------

    @_boundary("Email verification")
    def verify_email(self, session_id: str, token: str) -> VerificationResult:
        """
        Verify the contact address and create the durable affiliate.

        The staged -> email_verified -> affiliate_pending edges are observed
        by callers as one step. The durable record always gets system
        defaults (pending, lowest privilege, private), whatever the applicant
        submitted.

        Raises:
            SessionNotFound: Session missing or expired
            InvalidSessionState: Session is not staged
            VerificationAttemptsExhausted: Attempts already at maximum, or
                this mismatch used the last one
            InvalidVerificationToken: Token mismatch (attempt counted)
            ConcurrentSessionUpdate: Another verification won the race
        """
        session = self._load(session_id)
        if not token:
            raise InvalidRegistrationData("Verification token is required")
        self._check_verifiable(session)

        if not secrets.compare_digest(session.verification_token.encode(), token.encode()):
            self._count_failed_attempt(session_id)

        # Claim the transition first so a concurrent verification cannot
        # create a second durable record.
        verified_at = self.clock()

        def mark_verified(current: RegistrationSession) -> None:
            self._check_verifiable(current)
            current.advance(SessionStatus.EMAIL_VERIFIED)
            current.email_verified_at = verified_at

        session = self.sessions.update(session_id, mark_verified)
        logger.info("Email verified for session %s", session_id)

        affiliate = self.affiliates.create(self._durable_record_data(session))
        entity_id = str(affiliate["id"])
        approval_token = self.tokens.new_decision_token(ApprovalAction.APPROVE, session_id)
        rejection_token = self.tokens.new_decision_token(ApprovalAction.REJECT, session_id)
        created_at = self.clock()

        def attach_affiliate(current: RegistrationSession) -> None:
            if current.status != SessionStatus.EMAIL_VERIFIED:
                raise InvalidSessionState("Affiliate creation", current.status.value)
            current.entity_id = entity_id
            current.entity_created_at = created_at
            current.approval_token = approval_token
            current.rejection_token = rejection_token
            current.advance(SessionStatus.AFFILIATE_PENDING)

        session = self.sessions.update(session_id, attach_affiliate)
        logger.info("Affiliate %s created pending approval for session %s", entity_id, session_id)

        reviewer_outcome = self._notify_reviewers(session)
        pending_outcome = self._notify_applicant_pending(session)
        session = self._record_flags(
            session,
            reviewer_notification_sent=reviewer_outcome is NotificationOutcome.SENT,
            pending_notification_sent=pending_outcome is NotificationOutcome.SENT,
        )

        return VerificationResult(
            session_id=session_id,
            status=SessionStatus.AFFILIATE_PENDING,
            entity_id=entity_id,
            next_step=NEXT_STEP_ADMIN_APPROVAL,
            reviewer_notification_sent=session.reviewer_notification_sent,
            pending_notification_sent=session.pending_notification_sent,
            message="Email verified successfully. Affiliate created with pending status.",
        )

    # ------------------------------------------------------------------
    # Stage 3: reviewer decision
    # ------------------------------------------------------------------

    @_boundary("Approval processing")
    def process_approval(
        self,
        token: str,
        action: ApprovalAction | str,
        reviewer_id: str,
        reason: str | None = None,
    ) -> ApprovalResult:
        """
        Apply a reviewer decision identified by an approval/rejection token.

        Repeating a decision that already took effect returns success without
        touching the durable record or sending another notification (link
        pre-fetchers and double clicks hit this path).

        Raises:
            InvalidRegistrationData: Unknown action or missing reviewer
            SessionNotFound: Token does not parse or match a live session
            InvalidSessionState: Session is not awaiting a decision
            ConcurrentSessionUpdate: A different decision won the race
        """
        action = self._parse_action(action)
        if not reviewer_id:
            raise InvalidRegistrationData("Reviewer id is required")

        session = self._find_session_by_token(token, action)

        if session.decision is not None:
            return self._repeat_decision(session, action, reviewer_id, reason)

        if session.status != SessionStatus.AFFILIATE_PENDING:
            raise InvalidSessionState("Approval", session.status.value)

        if self._affiliate_reflects(session, action):
            logger.warning(
                "Affiliate %s already %sd, returning success without changes",
                session.entity_id,
                action.value,
            )
            return self._approval_result(
                session,
                action,
                reviewer_id,
                reason,
                processed_at=self.clock(),
                already_processed=True,
            )

        decided_at = self.clock()

        def stamp_decision(current: RegistrationSession) -> None:
            if current.status != SessionStatus.AFFILIATE_PENDING:
                raise InvalidSessionState("Approval", current.status.value)
            current.advance(_DECIDED_STATUSES[action])
            current.decision = action.value
            current.decided_by = reviewer_id
            current.decision_reason = reason
            current.decided_at = decided_at

        try:
            session = self.sessions.update(session.session_id, stamp_decision)
        except (ConcurrentSessionUpdate, InvalidSessionState):
            # Lost the stamp; a duplicate of the winning decision still succeeds.
            current = self._load(session.session_id)
            if current.decision != action.value:
                raise
            return self._repeat_decision(current, action, reviewer_id, reason)
        logger.info(
            "Session %s %sd by reviewer %s", session.session_id, action.value, reviewer_id
        )
        return self._finish_decision(session, action)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @_boundary("Status lookup")
    def get_registration_status(self, session_id: str) -> RegistrationSession:
        """
        Return the current session snapshot. No side effects.

        Raises:
            SessionNotFound: Session missing or expired
        """
        return self._load(session_id)

    @_boundary("Pending registration listing")
    def list_pending_registrations(self) -> list[RegistrationSession]:
        """Sessions awaiting a reviewer decision, newest first."""
        return self.resolver.list_by_status([SessionStatus.AFFILIATE_PENDING])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, session_id: str) -> RegistrationSession:
        session = self.sessions.load(session_id) if session_id else None
        if session is None:
            raise SessionNotFound("Registration session not found or expired")
        return session

    def _check_verifiable(self, session: RegistrationSession) -> None:
        if session.status != SessionStatus.STAGED:
            raise InvalidSessionState("Email verification", session.status.value)
        if session.attempts_exhausted:
            raise VerificationAttemptsExhausted("Maximum verification attempts exceeded")

    def _count_failed_attempt(self, session_id: str) -> NoReturn:
        def increment(current: RegistrationSession) -> None:
            self._check_verifiable(current)
            current.verification_attempts += 1

        session = self.sessions.update(session_id, increment)
        logger.warning(
            "Invalid verification token for session %s (%d/%d attempts)",
            session_id,
            session.verification_attempts,
            session.max_verification_attempts,
        )
        if session.attempts_exhausted:
            raise VerificationAttemptsExhausted("Maximum verification attempts exceeded")
        raise InvalidVerificationToken(session.attempts_remaining)

    def _durable_record_data(self, session: RegistrationSession) -> dict[str, Any]:
        data = dict(session.applicant_payload)
        data["email"] = session.email
        # System-only fields always override applicant input
        data["account_status"] = AccountStatus.PENDING.value
        data["privilege"] = Privilege.OWNER.value
        data["access_modifier"] = AccessModifier.PRIVATE.value
        data["active_member"] = False
        return data

    def _find_session_by_token(self, token: str, action: ApprovalAction) -> RegistrationSession:
        session_id = parse_decision_token(token or "")
        if session_id is None:
            logger.warning("Unparseable %s token: %s...", action.value, (token or "")[:8])
            raise SessionNotFound("Invalid or expired approval token")

        session = self.sessions.load(session_id)
        if session is None:
            raise SessionNotFound("Invalid or expired approval token")

        expected = (
            session.approval_token if action is ApprovalAction.APPROVE else session.rejection_token
        )
        if not token_matches(expected, token.strip()):
            logger.warning("%s token mismatch for session %s", action.value, session_id)
            raise SessionNotFound("Invalid or expired approval token")
        return session

    def _affiliate_reflects(self, session: RegistrationSession, action: ApprovalAction) -> bool:
        if session.entity_id is None:
            return False
        current = self.affiliates.get(session.entity_id)
        if current is None:
            return False
        return current.get("account_status") == _OUTCOME_ACCOUNT_STATUS[action].value

    def _repeat_decision(
        self,
        session: RegistrationSession,
        action: ApprovalAction,
        reviewer_id: str,
        reason: str | None,
    ) -> ApprovalResult:
        """Handle a token for a session that already has a decision."""
        if session.decision != action.value:
            raise InvalidSessionState("Approval", session.status.value)

        if session.status == SessionStatus.COMPLETED or self._affiliate_reflects(session, action):
            logger.info(
                "Decision %s already applied to session %s", action.value, session.session_id
            )
            if session.status != SessionStatus.COMPLETED:
                # Durable update landed but the completion write did not.
                session = self._complete(session)
            return self._approval_result(
                session,
                action,
                session.decided_by or reviewer_id,
                session.decision_reason,
                processed_at=session.decided_at or self.clock(),
                already_processed=True,
            )

        # Decision stamped but durable update never landed: finish it.
        logger.warning("Resuming unfinished %s for session %s", action.value, session.session_id)
        return self._finish_decision(session, action)

    def _finish_decision(
        self, session: RegistrationSession, action: ApprovalAction
    ) -> ApprovalResult:
        target = _OUTCOME_ACCOUNT_STATUS[action]
        record = self.affiliates.update(
            session.entity_id,
            {
                "account_status": target.value,
                "active_member": action is ApprovalAction.APPROVE,
            },
        )
        outcome = self._notify_outcome(session, action, record)
        session = self._complete(
            session, outcome_notification_sent=outcome is NotificationOutcome.SENT
        )
        return self._approval_result(
            session,
            action,
            session.decided_by or "",
            session.decision_reason,
            processed_at=session.decided_at or self.clock(),
        )

    def _complete(
        self, session: RegistrationSession, outcome_notification_sent: bool | None = None
    ) -> RegistrationSession:
        """Advance a decided session to completed; the flag is kept when None."""

        def complete(current: RegistrationSession) -> None:
            if outcome_notification_sent is not None:
                current.outcome_notification_sent = outcome_notification_sent
            if current.status != SessionStatus.COMPLETED:
                current.advance(SessionStatus.COMPLETED)

        try:
            return self.sessions.update(session.session_id, complete)
        except ConcurrentSessionUpdate:
            logger.warning("Session %s completed concurrently", session.session_id)
            return self._load(session.session_id)

    def _approval_result(
        self,
        session: RegistrationSession,
        action: ApprovalAction,
        reviewer_id: str,
        reason: str | None,
        processed_at: datetime,
        already_processed: bool = False,
    ) -> ApprovalResult:
        verb = "approved" if action is ApprovalAction.APPROVE else "rejected"
        message = (
            f"Affiliate already {verb}"
            if already_processed
            else f"Affiliate registration {verb} successfully"
        )
        return ApprovalResult(
            session_id=session.session_id,
            entity_id=session.entity_id,
            status=session.status,
            action=action,
            processed_by=reviewer_id,
            processed_at=processed_at,
            message=message,
            reason=reason,
            already_processed=already_processed,
        )

    def _record_flags(self, session: RegistrationSession, **flags: bool) -> RegistrationSession:
        """Persist notification flags; a lost race here leaves them unset."""

        def apply(current: RegistrationSession) -> None:
            for name, value in flags.items():
                setattr(current, name, value)

        try:
            return self.sessions.update(session.session_id, apply)
        except ConcurrentSessionUpdate:
            logger.warning("Could not record notification flags for %s", session.session_id)
            for name, value in flags.items():
                setattr(session, name, value)
            return session

    @staticmethod
    def _parse_action(action: ApprovalAction | str) -> ApprovalAction:
        try:
            return ApprovalAction(action)
        except ValueError:
            raise InvalidRegistrationData(f"Unknown approval action: {action}") from None

    @staticmethod
    def _normalize_email(email: object) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        if not isinstance(email, str) or "@" not in email:
            raise InvalidRegistrationData("A valid contact email address is required")
        return email.strip().lower()

    # ------------------------------------------------------------------
    # Notifications (best effort)
    # ------------------------------------------------------------------

    def _notify(self, recipient: str, template_name: str, data: dict[str, Any]) -> NotificationOutcome:
        try:
            delivered = self.notifier.send(recipient, template_name, data)
        except Exception:
            logger.exception("Failed to send %s notification to %s", template_name, recipient)
            return NotificationOutcome.FAILED
        if not delivered:
            logger.warning("Notification %s to %s was not accepted", template_name, recipient)
            return NotificationOutcome.FAILED
        return NotificationOutcome.SENT

    def _send_verification(self, session: RegistrationSession) -> NotificationOutcome:
        payload = session.applicant_payload
        data = {
            "name": payload.get("representative_first_name") or "Representative",
            "organization_name": payload.get("organization_name", ""),
            "email": session.email,
            "session_id": session.session_id,
            "verification_token": session.verification_token,
            "verification_url": (
                f"{self.frontend_url}/verify-affiliate-email"
                f"?sessionId={session.session_id}&token={session.verification_token}"
            ),
            "expires_at": session.expires_at.isoformat(),
        }
        return self._notify(session.email, TEMPLATE_VERIFICATION, data)

    def _notify_reviewers(self, session: RegistrationSession) -> NotificationOutcome:
        if not self.reviewer_emails:
            logger.warning("No reviewer addresses configured for session %s", session.session_id)
            return NotificationOutcome.FAILED

        approve = url_token(session.approval_token or "")
        reject = url_token(session.rejection_token or "")
        data = {
            **self._applicant_summary(session),
            "registration_date": session.created_at.date().isoformat(),
            "approve_token": session.approval_token,
            "reject_token": session.rejection_token,
            "approve_url": f"{self.frontend_url}/affiliate-approval/{approve}?action=approve",
            "reject_url": f"{self.frontend_url}/affiliate-approval/{reject}?action=reject",
            "phone": session.applicant_payload.get("phone"),
            "website": session.applicant_payload.get("website") or "Not provided",
        }
        outcomes = [
            self._notify(reviewer, TEMPLATE_REVIEWER_APPROVAL, data)
            for reviewer in self.reviewer_emails
        ]
        if all(outcome is NotificationOutcome.SENT for outcome in outcomes):
            return NotificationOutcome.SENT
        return NotificationOutcome.FAILED

    def _notify_applicant_pending(self, session: RegistrationSession) -> NotificationOutcome:
        data = {
            **self._applicant_summary(session),
            "submission_date": self.clock().date().isoformat(),
        }
        return self._notify(session.email, TEMPLATE_PENDING, data)

    def _notify_outcome(
        self,
        session: RegistrationSession,
        action: ApprovalAction,
        record: dict[str, Any] | None,
    ) -> NotificationOutcome:
        template = TEMPLATE_APPROVED if action is ApprovalAction.APPROVE else TEMPLATE_REJECTED
        data = {
            **self._applicant_summary(session),
            "entity_id": str((record or {}).get("id", session.entity_id)),
            "decision_date": self.clock().date().isoformat(),
            "reason": session.decision_reason or "No specific reason provided",
            "decided_by": session.decided_by,
        }
        return self._notify(session.email, template, data)

    @staticmethod
    def _applicant_summary(session: RegistrationSession) -> dict[str, Any]:
        payload = session.applicant_payload
        first = payload.get("representative_first_name") or ""
        last = payload.get("representative_last_name") or ""
        return {
            "representative_name": f"{first} {last}".strip() or "Representative",
            "representative_title": payload.get("representative_job_title"),
            "organization_name": payload.get("organization_name", ""),
            "email": session.email,
            "entity_id": session.entity_id,
        }

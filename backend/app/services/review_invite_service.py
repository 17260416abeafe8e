# backend/app/services/review_invite_service.py
"""
Review Invite Service for CoachConnect

A coach invites an ensemble by email to review them. The invite is
redeemable while pending and unexpired by whoever signs in with the
invited address; it leaves pending exactly once (accepted, declined or
expired) and is never reopened.

Expiry is lazy: nothing sweeps old invites. effective_invite_status()
decides from expires_at at every access, and the first access after expiry
writes 'expired' back so listings and admin views agree.
"""

from datetime import datetime, timedelta
import logging
import secrets
from typing import Callable, List, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import INVITE_TOKEN_BYTES, MAX_SESSION_YEAR, MIN_SESSION_YEAR
from ..core.exceptions import (
    ExpiredException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import SessionFormat
from ..models.review import Review
from ..models.review_invite import ReviewInvite, ReviewInviteStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import CallerContext
from ..repositories.profile_repository import CoachProfileRepository, EnsembleProfileRepository
from ..repositories.review_invite_repository import ReviewInviteRepository
from ..repositories.review_repository import ReviewRepository
from .base import BaseService
from .feedback import COACH_REVIEWS
from .notification_service import NotificationKind, NotificationService
from .rating_service import RatingService

logger = logging.getLogger(__name__)


def effective_invite_status(invite: ReviewInvite, now: datetime) -> ReviewInviteStatus:
    """
    The status an invite really has at ``now``.

    A pending invite past its expiry is expired whether or not that has been
    written back yet; every other stored status is final.
    """
    stored = ReviewInviteStatus(invite.status)
    if stored is ReviewInviteStatus.PENDING and ensure_utc(now) > ensure_utc(invite.expires_at):
        return ReviewInviteStatus.EXPIRED
    return stored


_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def normalize_email(raw: str) -> str:
    """Validate an address with pydantic and lower-case it; raises ValidationException."""
    try:
        address = _EMAIL_ADAPTER.validate_python((raw or "").strip())
    except ValidationError as exc:
        raise ValidationException("A valid email address is required", code="INVALID_EMAIL") from exc
    return address.lower()


def validate_session_metadata(
    session_month: Optional[int],
    session_year: Optional[int],
    session_format: Optional[str],
) -> Optional[SessionFormat]:
    """Check the optional when/how-was-the-session fields shared by review payloads."""
    if session_month is not None and not 1 <= session_month <= 12:
        raise ValidationException("Session month must be between 1 and 12", code="INVALID_SESSION_MONTH")
    if session_year is not None and not MIN_SESSION_YEAR <= session_year <= MAX_SESSION_YEAR:
        raise ValidationException("Session year is out of range", code="INVALID_SESSION_YEAR")
    if session_format is None:
        return None
    try:
        return SessionFormat(session_format)
    except ValueError as e:
        raise ValidationException(
            "Session format must be 'in_person' or 'virtual'", code="INVALID_SESSION_FORMAT"
        ) from e


class ReviewInviteService(BaseService):
    """Issues, resolves and redeems coach review invites."""

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        rating_service: Optional[RatingService] = None,
        *,
        ttl_days: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(db)
        self.repository = ReviewInviteRepository(db)
        self.review_repository = ReviewRepository(db)
        self.coach_repository = CoachProfileRepository(db)
        self.ensemble_repository = EnsembleProfileRepository(db)
        self.notification_service = notification_service or NotificationService(db)
        self.rating_service = rating_service or RatingService(db)
        self.ttl = timedelta(days=settings.review_invite_ttl_days if ttl_days is None else ttl_days)
        self.clock = clock

    def effective_status(self, invite: ReviewInvite) -> ReviewInviteStatus:
        return effective_invite_status(invite, self.clock())

    # ------------------------------------------------------------------
    # Coach side
    # ------------------------------------------------------------------

    @BaseService.measure_operation("issue_review_invite")
    def issue_invite(
        self,
        caller: CallerContext,
        *,
        ensemble_email: str,
        ensemble_name: Optional[str] = None,
        ensemble_profile_id: Optional[str] = None,
    ) -> ReviewInvite:
        """
        Create a pending invite and email it.

        Raises:
            ForbiddenException: Caller has no coach profile
            ValidationException: Bad address, or the coach's own address
            NotFoundException: ensemble_profile_id given but unknown
            InvalidStateException: A live invite to this address already exists
        """
        if not caller.is_coach:
            raise ForbiddenException("Coach profile required")
        email = normalize_email(ensemble_email)
        if email == caller.normalized_email:
            raise ValidationException("You cannot invite yourself to review", code="SELF_INVITE")

        now = self.clock()
        with self.transaction():
            if ensemble_profile_id and not self.ensemble_repository.get_by_id(ensemble_profile_id):
                raise NotFoundException("Ensemble not found", code="ENSEMBLE_NOT_FOUND")
            if self.repository.find_live_for_coach_and_email(caller.coach_profile_id, email, now):
                raise InvalidStateException("A pending invite already exists for this ensemble")

            invite = self.repository.create(
                token=secrets.token_urlsafe(INVITE_TOKEN_BYTES),
                coach_profile_id=caller.coach_profile_id,
                ensemble_email=email,
                ensemble_name=ensemble_name,
                ensemble_profile_id=ensemble_profile_id,
                status=ReviewInviteStatus.PENDING,
                expires_at=now + self.ttl,
                created_at=now,
            )
            coach = self.coach_repository.get_by_id(caller.coach_profile_id)

        self.log_operation("issue_review_invite", invite_id=invite.id, coach_id=caller.coach_profile_id)

        # Delivery is best effort; the invite stands either way
        sent = self.notification_service.send(
            email,
            NotificationKind.REVIEW_INVITE,
            {
                "coach_name": coach.full_name if coach else "",
                "ensemble_name": ensemble_name,
                "invite_url": f"{settings.frontend_url.rstrip('/')}/reviews/invite/{invite.token}",
                "expires_at": invite.expires_at,
            },
        )
        if not sent:
            self.logger.warning(f"Review invite {invite.id} created but the email was not delivered")
        return invite

    @BaseService.measure_operation("list_coach_invites")
    def list_invites_for_coach(self, caller: CallerContext) -> List[ReviewInvite]:
        """Invites the caller has sent, newest first."""
        if not caller.is_coach:
            raise ForbiddenException("Coach profile required")
        return self.repository.list_for_coach(caller.coach_profile_id)

    # ------------------------------------------------------------------
    # Recipient side
    # ------------------------------------------------------------------

    @BaseService.measure_operation("list_pending_invites")
    def list_pending_invites(self, caller_email: str) -> List[ReviewInvite]:
        """Live invites addressed to the caller, newest first."""
        return self.repository.list_live_for_email(caller_email.strip().lower(), self.clock())

    @BaseService.measure_operation("fetch_review_invite")
    def fetch_invite(self, token: str, caller_email: str) -> ReviewInvite:
        """
        Resolve a token for its recipient.

        Raises:
            NotFoundException: Unknown token
            ForbiddenException: Signed in with a different address
            ExpiredException: Past expires_at (written back as expired)
            InvalidStateException: Already accepted or declined
        """
        return self._require_pending(token, caller_email)

    @BaseService.measure_operation("decline_review_invite")
    def decline_invite(self, token: str, caller_email: str) -> ReviewInvite:
        invite = self._require_pending(token, caller_email)
        with self.transaction():
            if not self.repository.transition(invite.id, ReviewInviteStatus.DECLINED, responded_at=self.clock()):
                raise self._lost_race(invite.id)

        self.repository.refresh(invite)
        prometheus_metrics.inc_invite_outcome("declined")
        self.log_operation("decline_review_invite", invite_id=invite.id)
        return invite

    @BaseService.measure_operation("accept_review_invite")
    def accept_invite(
        self,
        token: str,
        caller: CallerContext,
        *,
        rating: int,
        review_text: Optional[str] = None,
        session_month: Optional[int] = None,
        session_year: Optional[int] = None,
        session_format: Optional[str] = None,
    ) -> Review:
        """
        Redeem the invite by writing a review, then refresh the coach's rating.

        The invite flip and the review insert commit together; if another
        request redeemed the invite first, no review is written.
        """
        invite = self._require_pending(token, caller.email)
        if not caller.has_ensembles:
            raise ForbiddenException("Ensemble profile required to submit reviews")
        COACH_REVIEWS.validate(rating, review_text)
        fmt = validate_session_metadata(session_month, session_year, session_format)

        if caller.owns_ensemble(invite.ensemble_profile_id):
            reviewer_id = invite.ensemble_profile_id
        else:
            reviewer_id = caller.default_ensemble_id

        now = self.clock()
        with self.transaction():
            if not self.repository.transition(invite.id, ReviewInviteStatus.ACCEPTED, responded_at=now):
                raise self._lost_race(invite.id)
            review = self.review_repository.create_review(
                coach_profile_id=invite.coach_profile_id,
                reviewer_id=reviewer_id,
                invite_id=invite.id,
                rating=rating,
                review_text=review_text,
                session_month=session_month,
                session_year=session_year,
                session_format=fmt,
                created_at=now,
            )

        prometheus_metrics.inc_invite_outcome("accepted")
        self.log_operation("accept_review_invite", invite_id=invite.id, review_id=review.id)
        self.rating_service.recompute_after_review(invite.coach_profile_id, source="invite")
        return review

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_pending(self, token: str, caller_email: str) -> ReviewInvite:
        invite = self.repository.get_by_token(token)
        if not invite:
            raise NotFoundException("Invite not found", code="INVITE_NOT_FOUND")
        if (caller_email or "").strip().lower() != invite.ensemble_email.lower():
            raise ForbiddenException("This invite is not for your account")

        status = self.effective_status(invite)
        if status is ReviewInviteStatus.EXPIRED:
            self._write_back_expiry(invite)
            raise ExpiredException("This invite has expired", details={"expires_at": invite.expires_at.isoformat()})
        if status is not ReviewInviteStatus.PENDING:
            raise InvalidStateException(
                "This invite has already been used or expired", current_status=status.value
            )
        return invite

    def _write_back_expiry(self, invite: ReviewInvite) -> None:
        if ReviewInviteStatus(invite.status) is not ReviewInviteStatus.PENDING:
            return
        with self.transaction():
            changed = self.repository.transition(invite.id, ReviewInviteStatus.EXPIRED)
        if changed:
            self.repository.refresh(invite)
            prometheus_metrics.inc_invite_outcome("expired")
            self.logger.info(f"Review invite {invite.id} marked expired")

    def _lost_race(self, invite_id: str) -> InvalidStateException:
        latest = self.repository.get_current_status(invite_id)
        latest_value = getattr(latest, "value", latest)
        return InvalidStateException(
            "This invite has already been used or expired", current_status=latest_value
        )

# backend/app/routes/v1/review_invites.py
"""
Review invite routes - API v1

A coach invites an ensemble (by email) to review them; the ensemble
views, declines or accepts the invite by its token.

Endpoints:
    POST /                  → Coach issues an invite
    GET /                   → Coach lists invites they've sent
    GET /pending            → Caller lists live invites addressed to them
    GET /{token}            → Recipient resolves an invite
    POST /{token}/decline   → Recipient declines
    POST /{token}/accept    → Recipient accepts by submitting a review
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies.auth import get_current_caller
from app.api.dependencies.services import get_review_invite_service
from app.models.review_invite import ReviewInvite
from app.principal import CallerContext
from app.schemas.review import ReviewItem, ReviewPayload
from app.schemas.review_invite import (
    IssuedReviewInviteResponse,
    ReviewInviteCreate,
    ReviewInviteListResponse,
    ReviewInviteResponse,
)
from app.services.review_invite_service import ReviewInviteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["review-invites-v1"])


def _to_response(invite: ReviewInvite, service: ReviewInviteService) -> ReviewInviteResponse:
    """Serialize with the status as of now, so an unexpired-but-stale row reads as expired."""
    response = ReviewInviteResponse.model_validate(invite)
    return response.model_copy(update={"status": service.effective_status(invite).value})


@router.post("", response_model=IssuedReviewInviteResponse, status_code=status.HTTP_201_CREATED)
def issue_invite(
    payload: ReviewInviteCreate,
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> IssuedReviewInviteResponse:
    invite = invite_service.issue_invite(
        caller,
        ensemble_email=payload.ensemble_email,
        ensemble_name=payload.ensemble_name,
        ensemble_profile_id=payload.ensemble_profile_id,
    )
    return IssuedReviewInviteResponse.model_validate(invite)


@router.get("", response_model=ReviewInviteListResponse)
def list_sent_invites(
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> ReviewInviteListResponse:
    invites = invite_service.list_invites_for_coach(caller)
    return ReviewInviteListResponse(invites=[_to_response(i, invite_service) for i in invites])


@router.get("/pending", response_model=ReviewInviteListResponse)
def list_pending_invites(
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> ReviewInviteListResponse:
    invites = invite_service.list_pending_invites(caller.email)
    return ReviewInviteListResponse(invites=[_to_response(i, invite_service) for i in invites])


@router.get("/{token}", response_model=ReviewInviteResponse)
def get_invite(
    token: str,
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> ReviewInviteResponse:
    """
    Resolve an invite for its recipient.

    404 unknown token, 403 wrong account, 410 expired, 409 already answered.
    """
    invite = invite_service.fetch_invite(token, caller.email)
    return _to_response(invite, invite_service)


@router.post("/{token}/decline", response_model=ReviewInviteResponse)
def decline_invite(
    token: str,
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> ReviewInviteResponse:
    invite = invite_service.decline_invite(token, caller.email)
    return _to_response(invite, invite_service)


@router.post("/{token}/accept", response_model=ReviewItem, status_code=status.HTTP_201_CREATED)
def accept_invite(
    token: str,
    payload: ReviewPayload,
    caller: CallerContext = Depends(get_current_caller),
    invite_service: ReviewInviteService = Depends(get_review_invite_service),
) -> ReviewItem:
    review = invite_service.accept_invite(
        token,
        caller,
        rating=payload.rating,
        review_text=payload.review_text,
        session_month=payload.session_month,
        session_year=payload.session_year,
        session_format=payload.session_format,
    )
    return ReviewItem.model_validate(review)

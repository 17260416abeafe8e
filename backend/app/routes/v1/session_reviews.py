# backend/app/routes/v1/session_reviews.py
"""
Session review routes - API v1

Coach-side feedback on ensembles after completed sessions.

Endpoints:
    GET /pending                        → Coach's open feedback entries
    GET /pending/count                  → How many are open
    POST /{review_id}/submit            → Coach submits rating and feedback
    GET /ensemble/{ensemble_id}         → Completed feedback about an ensemble
"""

from fastapi import APIRouter, Depends

from app.api.dependencies.auth import get_current_caller
from app.api.dependencies.services import get_session_review_service
from app.principal import CallerContext
from app.schemas.session_review import (
    PendingCountResponse,
    SessionReviewListResponse,
    SessionReviewResponse,
    SessionReviewSubmit,
)
from app.services.session_review_service import SessionReviewService

router = APIRouter(tags=["session-reviews-v1"])


@router.get("/pending", response_model=SessionReviewListResponse)
def list_pending(
    caller: CallerContext = Depends(get_current_caller),
    service: SessionReviewService = Depends(get_session_review_service),
) -> SessionReviewListResponse:
    reviews = service.list_pending(caller)
    return SessionReviewListResponse(reviews=[SessionReviewResponse.model_validate(r) for r in reviews])


@router.get("/pending/count", response_model=PendingCountResponse)
def count_pending(
    caller: CallerContext = Depends(get_current_caller),
    service: SessionReviewService = Depends(get_session_review_service),
) -> PendingCountResponse:
    return PendingCountResponse(count=service.count_pending(caller))


@router.post("/{review_id}/submit", response_model=SessionReviewResponse)
def submit_session_review(
    review_id: str,
    payload: SessionReviewSubmit,
    caller: CallerContext = Depends(get_current_caller),
    service: SessionReviewService = Depends(get_session_review_service),
) -> SessionReviewResponse:
    review = service.submit(caller, review_id, rating=payload.rating, feedback_text=payload.feedback_text)
    return SessionReviewResponse.model_validate(review)


@router.get("/ensemble/{ensemble_id}", response_model=SessionReviewListResponse)
def list_ensemble_feedback(
    ensemble_id: str,
    caller: CallerContext = Depends(get_current_caller),
    service: SessionReviewService = Depends(get_session_review_service),
) -> SessionReviewListResponse:
    reviews = service.list_feedback_for_ensemble(ensemble_id)
    return SessionReviewListResponse(reviews=[SessionReviewResponse.model_validate(r) for r in reviews])

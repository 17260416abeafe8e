# backend/app/routes/v1/reviews.py
"""
Coach review routes - API v1

Endpoints:
    POST /                         → Ensemble submits a review directly
    GET /coach/{coach_id}          → Public list of a coach's reviews
    GET /coach/{coach_id}/rating   → Coach's aggregate rating
    GET /status?coach_id=          → Per-ensemble review eligibility for the caller
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies.auth import get_current_caller
from app.api.dependencies.services import get_rating_service, get_review_service
from app.principal import CallerContext
from app.schemas.review import (
    CoachRatingResponse,
    ReviewItem,
    ReviewListResponse,
    ReviewStatusResponse,
    ReviewSubmitRequest,
)
from app.services.rating_service import RatingService
from app.services.review_service import ReviewService

router = APIRouter(tags=["reviews-v1"])


@router.post("", response_model=ReviewItem, status_code=status.HTTP_201_CREATED)
def submit_review(
    payload: ReviewSubmitRequest,
    caller: CallerContext = Depends(get_current_caller),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewItem:
    review = review_service.submit_review(
        caller,
        coach_profile_id=payload.coach_profile_id,
        ensemble_profile_id=payload.ensemble_profile_id,
        rating=payload.rating,
        review_text=payload.review_text,
        session_month=payload.session_month,
        session_year=payload.session_year,
        session_format=payload.session_format,
    )
    return ReviewItem.model_validate(review)


@router.get("/status", response_model=ReviewStatusResponse)
def get_review_status(
    coach_id: str = Query(..., description="Coach profile to check eligibility against"),
    caller: CallerContext = Depends(get_current_caller),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewStatusResponse:
    return ReviewStatusResponse(**review_service.get_review_status(caller, coach_id))


@router.get("/coach/{coach_id}", response_model=ReviewListResponse)
def list_coach_reviews(
    coach_id: str,
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewListResponse:
    reviews = review_service.list_reviews_for_coach(coach_id)
    return ReviewListResponse(reviews=[ReviewItem.model_validate(r) for r in reviews])


@router.get("/coach/{coach_id}/rating", response_model=CoachRatingResponse)
def get_coach_rating(
    coach_id: str,
    rating_service: RatingService = Depends(get_rating_service),
) -> CoachRatingResponse:
    return CoachRatingResponse(**rating_service.get_coach_rating(coach_id))

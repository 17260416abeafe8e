# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Ensembles request sessions; the addressed coach accepts, declines and
completes them.

Endpoints:
    POST /                      → Create a booking request
    GET /                       → List the caller's bookings
    GET /{booking_id}           → Get one booking
    PUT /{booking_id}/accept    → Coach accepts a pending booking
    PUT /{booking_id}/decline   → Coach declines a pending booking
    PUT /{booking_id}/complete  → Coach marks an accepted booking completed
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies.auth import get_current_caller
from app.api.dependencies.services import get_booking_service
from app.models.booking import BookingStatus
from app.principal import CallerContext
from app.schemas.booking import BookingCreate, BookingListResponse, BookingResponse
from app.services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Create a pending booking request from one of the caller's ensembles."""
    booking = booking_service.create_booking(
        caller,
        coach_id=payload.coach_id,
        proposed_dates=payload.proposed_dates,
        session_type=payload.session_type,
        session_format=payload.session_format,
        goals=payload.goals,
        special_requests=payload.special_requests,
        ensemble_profile_id=payload.ensemble_profile_id,
    )
    return BookingResponse.model_validate(booking)


@router.get("", response_model=BookingListResponse)
def list_bookings(
    role: Optional[str] = Query(None, description="'coach' or 'ensemble'"),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings = booking_service.list_bookings(caller, role=role, status=status_filter)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(booking_service.get_booking(booking_id, caller))


@router.put("/{booking_id}/accept", response_model=BookingResponse)
def accept_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(booking_service.accept_booking(booking_id, caller))


@router.put("/{booking_id}/decline", response_model=BookingResponse)
def decline_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(booking_service.decline_booking(booking_id, caller))


@router.put("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Mark an accepted booking completed.

    With the on_completion trigger this also opens the coach's pending
    feedback entry for the ensemble.
    """
    return BookingResponse.model_validate(booking_service.complete_booking(booking_id, caller))

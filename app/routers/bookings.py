"""
Booking endpoints (authenticated) – admission, listing and cancellation.
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentSession
from app.models import Booking, BookingCreate, BookingListResponse, BookingStatus
from app.services import admission

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
    operation_id="createBooking",
    summary="Record a booking on one of the owner's courts",
    responses={409: {"description": "The range overlaps an existing booking"}},
)
async def create_booking(body: BookingCreate, session: CurrentSession) -> Booking:
    return await admission.create_booking(
        session,
        court_id=body.court_id,
        start_time=body.start_time,
        end_time=body.end_time,
        customer_name=body.customer_name,
        amount=body.amount,
    )


@router.get(
    "",
    response_model=BookingListResponse,
    operation_id="listBookings",
    summary="List the owner's bookings, newest first",
)
async def list_bookings(
    session: CurrentSession,
    court_id: UUID | None = Query(None, description="Filter by court"),
    booking_status: BookingStatus | None = Query(None, alias="status", description="Filter by status"),
) -> BookingListResponse:
    bookings = await admission.list_bookings(session, court_id=court_id, status=booking_status)
    return BookingListResponse(bookings=bookings)


@router.delete(
    "/{booking_id}",
    response_model=Booking,
    operation_id="cancelBooking",
    summary="Cancel a booking",
)
async def cancel_booking(booking_id: UUID, session: CurrentSession) -> Booking:
    return await admission.cancel_booking(session, booking_id)

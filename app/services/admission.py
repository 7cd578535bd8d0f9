"""
Booking admission – validating and committing bookings against the
current persisted state.

Checks run in a fixed order and fail before anything is written:

1.  The session carries an authenticated identity.
2.  The court exists.
3.  The caller owns the court.
4.  The interval (and the remaining fields) are valid.
5.  No non-cancelled booking on the court overlaps the interval.

Step 5 is not a separate read: it is evaluated inside the same SQL
statement that inserts the row (see ``db.insert_booking_if_free``), so two
concurrent requests for overlapping ranges can never both succeed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from app import db
from app.config import BOOKING_DEFAULT_STATUS
from app.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from app.models import Booking, BookingStatus, Court, Session
from app.services.overlap import validate_interval

logger = logging.getLogger(__name__)


def _utc_or_none(dt: datetime | None) -> datetime | None:
    return db.as_utc(dt) if dt is not None else None


def _require_identity(session: Session) -> UUID:
    if not session.is_authenticated:
        raise Unauthorized("Authentication required")
    return session.user_id  # type: ignore[return-value]


async def _require_owned_court(session: Session, court_id: UUID) -> Court:
    user_id = _require_identity(session)
    court = await db.get_court(court_id)
    if court is None:
        raise NotFound(f"Court {court_id} not found")
    if court.owner_id != user_id:
        raise Forbidden("You can only book courts you own")
    return court


async def create_booking(
    session: Session,
    court_id: UUID,
    start_time: datetime,
    end_time: datetime,
    customer_name: str,
    amount: float = 0,
) -> Booking:
    """Admit a new booking or raise the first failing precondition."""
    court = await _require_owned_court(session, court_id)

    start_time, end_time = _utc_or_none(start_time), _utc_or_none(end_time)
    validate_interval(start_time, end_time)
    if not customer_name or not customer_name.strip():
        raise ValidationError("customer_name", "customer_name is required")
    if amount is None or amount < 0:
        raise ValidationError("amount", "amount must be zero or positive")

    booking = await db.insert_booking_if_free(
        court_id=court.id,
        owner_id=court.owner_id,
        customer_name=customer_name.strip(),
        start_time=start_time,
        end_time=end_time,
        amount=float(amount),
        status=BookingStatus(BOOKING_DEFAULT_STATUS),
    )
    if booking is None:
        logger.warning(
            "Rejected booking on court %s [%s, %s): time conflict",
            court.id, start_time.isoformat(), end_time.isoformat(),
        )
        raise Conflict("Time conflict")

    logger.info(
        "Booking %s admitted on court %s [%s, %s)",
        booking.id, court.id, start_time.isoformat(), end_time.isoformat(),
    )
    return booking


async def cancel_booking(session: Session, booking_id: UUID) -> Booking:
    """
    Cancel a booking so its interval stops occupying the court.

    Cancelling an unknown or already-cancelled booking raises NotFound.
    """
    user_id = _require_identity(session)
    booking = await db.get_booking(booking_id)
    if booking is None or booking.status == BookingStatus.CANCELLED:
        raise NotFound(f"Booking {booking_id} not found")
    if booking.owner_id != user_id:
        raise Forbidden("You are not authorized to cancel this booking")

    cancelled = await db.set_booking_status(booking_id, BookingStatus.CANCELLED)
    logger.info("Booking %s cancelled", booking_id)
    return cancelled  # type: ignore[return-value]


async def list_bookings(
    session: Session,
    *,
    court_id: UUID | None = None,
    status: BookingStatus | None = None,
) -> list[Booking]:
    """The caller's bookings, newest first."""
    user_id = _require_identity(session)
    return await db.list_bookings(user_id, court_id=court_id, status=status)

"""
Availability endpoints – occupied ranges on a court's timeline.

Public by policy: the response only contains ``{start_time, end_time}``
pairs, never customer details.
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Request

from app.models import AvailabilityRequest, AvailabilityResponse
from app.rate_limit import AVAILABILITY, limiter
from app.services.availability import query_availability

router = APIRouter(prefix="/api", tags=["availability"])


@router.post(
    "/availability",
    response_model=AvailabilityResponse,
    operation_id="queryAvailability",
    summary="List occupied ranges on a court within a time window",
)
@limiter.limit(AVAILABILITY)
async def post_availability(request: Request, body: AvailabilityRequest) -> AvailabilityResponse:
    ranges = await query_availability(body.court_id, body.start_time, body.end_time)
    return AvailabilityResponse(court_id=body.court_id, bookings=ranges)


@router.get(
    "/courts/{court_id}/availability",
    response_model=AvailabilityResponse,
    operation_id="getCourtAvailability",
    summary="List occupied ranges on a court within a time window",
)
@limiter.limit(AVAILABILITY)
async def get_court_availability(
    request: Request,
    court_id: UUID,
    start: datetime = Query(..., description="Window start (inclusive)"),
    end: datetime = Query(..., description="Window end (exclusive)"),
) -> AvailabilityResponse:
    ranges = await query_availability(court_id, start, end)
    return AvailabilityResponse(court_id=court_id, bookings=ranges)

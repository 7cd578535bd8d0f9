"""
Court endpoints – owners manage the courts of their venue.
"""

from uuid import UUID

from fastapi import APIRouter, status

from app.dependencies import CurrentSession
from app.models import Court, CourtCreate, CourtListResponse, CourtUpdate, MessageResponse
from app.services import courts as court_service

router = APIRouter(prefix="/api/courts", tags=["courts"])


@router.get(
    "",
    response_model=CourtListResponse,
    operation_id="listCourts",
    summary="List the authenticated owner's courts",
)
async def list_courts(session: CurrentSession) -> CourtListResponse:
    return CourtListResponse(courts=await court_service.list_courts(session))


@router.post(
    "",
    response_model=Court,
    status_code=status.HTTP_201_CREATED,
    operation_id="createCourt",
    summary="Create a court",
)
async def create_court(body: CourtCreate, session: CurrentSession) -> Court:
    return await court_service.create_court(session, body)


@router.get(
    "/{court_id}",
    response_model=Court,
    operation_id="getCourt",
    summary="Get one of the authenticated owner's courts",
)
async def get_court(court_id: UUID, session: CurrentSession) -> Court:
    return await court_service.get_court(session, court_id)


@router.put(
    "/{court_id}",
    response_model=Court,
    operation_id="updateCourt",
    summary="Update a court",
)
async def update_court(court_id: UUID, body: CourtUpdate, session: CurrentSession) -> Court:
    return await court_service.update_court(session, court_id, body)


@router.delete(
    "/{court_id}",
    response_model=MessageResponse,
    operation_id="deleteCourt",
    summary="Delete a court and its bookings",
)
async def delete_court(court_id: UUID, session: CurrentSession) -> MessageResponse:
    await court_service.delete_court(session, court_id)
    return MessageResponse(message="Court deleted successfully")

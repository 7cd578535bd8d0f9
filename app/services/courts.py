"""
Court management for venue owners.

Courts are owned by exactly one user; names are unique per owner.
"""

from __future__ import annotations

import logging
from uuid import UUID

import aiosqlite

from app import db
from app.errors import Conflict, NotFound, Unauthorized
from app.models import Court, CourtCreate, CourtUpdate, Session

logger = logging.getLogger(__name__)


def _owner_id(session: Session) -> UUID:
    if not session.is_authenticated:
        raise Unauthorized("Authentication required")
    return session.user_id  # type: ignore[return-value]


async def _get_owned(session: Session, court_id: UUID) -> Court:
    owner_id = _owner_id(session)
    court = await db.get_court(court_id)
    # Someone else's court is reported as missing.
    if court is None or court.owner_id != owner_id:
        raise NotFound("Court not found or unauthorized")
    return court


async def create_court(session: Session, body: CourtCreate) -> Court:
    owner_id = _owner_id(session)
    try:
        court = await db.create_court(
            owner_id,
            name=body.name.strip(),
            sport_type=body.sport_type,
            price_per_hour=body.price_per_hour,
            surface=body.surface,
        )
    except aiosqlite.IntegrityError:
        raise Conflict("Court with this name already exists in your venue.") from None
    logger.info("Court %s (%s) created by %s", court.id, court.name, owner_id)
    return court


async def list_courts(session: Session) -> list[Court]:
    return await db.list_courts(_owner_id(session))


async def get_court(session: Session, court_id: UUID) -> Court:
    return await _get_owned(session, court_id)


async def update_court(session: Session, court_id: UUID, body: CourtUpdate) -> Court:
    await _get_owned(session, court_id)
    try:
        court = await db.update_court(
            court_id,
            name=body.name.strip(),
            sport_type=body.sport_type,
            price_per_hour=body.price_per_hour,
            surface=body.surface,
        )
    except aiosqlite.IntegrityError:
        raise Conflict("Court with this name already exists in your venue.") from None
    return court  # type: ignore[return-value]


async def delete_court(session: Session, court_id: UUID) -> None:
    await _get_owned(session, court_id)
    await db.delete_court(court_id)
    logger.info("Court %s deleted", court_id)

"""
SQLite database layer using aiosqlite.

Stores users, one-time passwords, courts and bookings.
Tables are created automatically on first connect.

Timestamps are stored as fixed-width UTC strings so that string
comparison in SQL matches chronological order.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import UUID, uuid4

import aiosqlite

from app.config import DB_PATH
from app.models import Booking, BookingStatus, Court, UserInfo

logger = logging.getLogger(__name__)

# ── Module-level connection ───────────────────────────────────────────────

_db: aiosqlite.Connection | None = None

# Serializes statement+commit pairs on the shared connection.
_write_lock: asyncio.Lock = asyncio.Lock()


async def init_db() -> None:
    """Open the database and create tables if they don't exist."""
    global _db, _write_lock
    db_path = Path(DB_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(db_path))
    _db.row_factory = aiosqlite.Row  # dict-like rows
    await _db.execute("PRAGMA journal_mode=WAL")
    await _db.execute("PRAGMA foreign_keys=ON")

    await _db.executescript(_SCHEMA)
    await _db.commit()
    _write_lock = asyncio.Lock()
    logger.info("Database initialized at %s", db_path)


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("Database connection closed")


def get_db() -> aiosqlite.Connection:
    """Return the active database connection (must call init_db first)."""
    assert _db is not None, "Database not initialized, call init_db() first"
    return _db


# ── Schema ────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id              TEXT PRIMARY KEY,
    email           TEXT NOT NULL UNIQUE,
    created_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS otp_codes (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    email           TEXT NOT NULL,
    code            TEXT NOT NULL,
    expires_at      TEXT NOT NULL,
    used            INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_otp_email ON otp_codes(email);

CREATE TABLE IF NOT EXISTS courts (
    id              TEXT PRIMARY KEY,
    owner_id        TEXT NOT NULL,
    name            TEXT NOT NULL,
    sport_type      TEXT NOT NULL,
    price_per_hour  REAL NOT NULL,
    surface         TEXT NOT NULL,
    created_at      TEXT NOT NULL,
    UNIQUE (owner_id, name)
);

CREATE INDEX IF NOT EXISTS idx_courts_owner ON courts(owner_id);

CREATE TABLE IF NOT EXISTS bookings (
    id              TEXT PRIMARY KEY,
    court_id        TEXT NOT NULL,
    owner_id        TEXT NOT NULL,
    customer_name   TEXT NOT NULL,
    start_time      TEXT NOT NULL,  -- inclusive, UTC
    end_time        TEXT NOT NULL,  -- exclusive, UTC
    amount          REAL NOT NULL DEFAULT 0,
    status          TEXT NOT NULL,
    created_at      TEXT NOT NULL,
    CHECK (start_time < end_time),
    FOREIGN KEY (court_id) REFERENCES courts(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_bookings_court_time ON bookings(court_id, start_time);
CREATE INDEX IF NOT EXISTS idx_bookings_owner ON bookings(owner_id);
"""


# ── Helpers ───────────────────────────────────────────────────────────────

# Fixed width so that text order in SQL is time order. The year is padded by
# hand: strftime's %Y is not zero-padded for years before 1000 on glibc.
_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def as_utc(dt: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _ts(dt: datetime) -> str:
    dt = as_utc(dt)
    return f"{dt.year:04d}-" + dt.strftime("%m-%dT%H:%M:%S.%fZ")


def _parse_ts(raw: str) -> datetime:
    return datetime.strptime(raw, _TS_FORMAT).replace(tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_user(row: aiosqlite.Row) -> UserInfo:
    return UserInfo(
        id=UUID(row["id"]),
        email=row["email"],
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_court(row: aiosqlite.Row) -> Court:
    return Court(
        id=UUID(row["id"]),
        owner_id=UUID(row["owner_id"]),
        name=row["name"],
        sport_type=row["sport_type"],
        price_per_hour=row["price_per_hour"],
        surface=row["surface"],
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_booking(row: aiosqlite.Row) -> Booking:
    """Convert a bookings ⋈ courts row to a Booking model."""
    return Booking(
        id=UUID(row["id"]),
        court_id=UUID(row["court_id"]),
        court_name=row["court_name"],
        owner_id=UUID(row["owner_id"]),
        customer_name=row["customer_name"],
        start_time=_parse_ts(row["start_time"]),
        end_time=_parse_ts(row["end_time"]),
        amount=row["amount"],
        status=BookingStatus(row["status"]),
        created_at=_parse_ts(row["created_at"]),
    )


# ══════════════════════════════════════════════════════════════════════════
#                    USER / OTP REPOSITORY
# ══════════════════════════════════════════════════════════════════════════


async def get_or_create_user(email: str) -> UserInfo:
    """Return the user with this email, creating it on first login."""
    db = get_db()
    email = email.lower()
    async with _write_lock:
        await db.execute(
            "INSERT OR IGNORE INTO users (id, email, created_at) VALUES (?, ?, ?)",
            (str(uuid4()), email, _ts(_now())),
        )
        await db.commit()
    async with db.execute("SELECT * FROM users WHERE email = ?", (email,)) as cur:
        row = await cur.fetchone()
    return _row_to_user(row)


async def get_user(user_id: UUID) -> UserInfo | None:
    db = get_db()
    async with db.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)) as cur:
        row = await cur.fetchone()
    return _row_to_user(row) if row else None


async def create_otp(email: str, code: str, ttl_seconds: int) -> None:
    """Store a one-time password for *email*, valid for *ttl_seconds*."""
    db = get_db()
    expires_at = _now() + timedelta(seconds=ttl_seconds)
    async with _write_lock:
        await db.execute(
            "INSERT INTO otp_codes (email, code, expires_at) VALUES (?, ?, ?)",
            (email.lower(), code, _ts(expires_at)),
        )
        await db.commit()


async def verify_otp(email: str, code: str) -> bool:
    """Consume a matching, unexpired, unused OTP. Returns True on success."""
    db = get_db()
    async with _write_lock:
        cur = await db.execute(
            """
            UPDATE otp_codes SET used = 1
            WHERE id = (
                SELECT id FROM otp_codes
                WHERE email = ? AND code = ? AND used = 0 AND expires_at > ?
                ORDER BY id DESC LIMIT 1
            )
            """,
            (email.lower(), code, _ts(_now())),
        )
        await db.commit()
    return cur.rowcount > 0


# ══════════════════════════════════════════════════════════════════════════
#                    COURT REPOSITORY
# ══════════════════════════════════════════════════════════════════════════


async def create_court(
    owner_id: UUID,
    name: str,
    sport_type: str,
    price_per_hour: float,
    surface: str,
) -> Court:
    """
    Insert a new court and return it.

    Raises ``aiosqlite.IntegrityError`` when the owner already has a court
    with this name.
    """
    db = get_db()
    court_id = str(uuid4())
    async with _write_lock:
        try:
            await db.execute(
                """
                INSERT INTO courts (id, owner_id, name, sport_type, price_per_hour, surface, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (court_id, str(owner_id), name, sport_type, price_per_hour, surface, _ts(_now())),
            )
        except aiosqlite.IntegrityError:
            await db.rollback()
            raise
        await db.commit()
    return await get_court(UUID(court_id))  # type: ignore[return-value]


async def get_court(court_id: UUID) -> Court | None:
    """Fetch a single court by ID."""
    db = get_db()
    async with db.execute("SELECT * FROM courts WHERE id = ?", (str(court_id),)) as cur:
        row = await cur.fetchone()
    return _row_to_court(row) if row else None


async def list_courts(owner_id: UUID) -> list[Court]:
    """List an owner's courts, newest first."""
    db = get_db()
    async with db.execute(
        "SELECT * FROM courts WHERE owner_id = ? ORDER BY created_at DESC, rowid DESC",
        (str(owner_id),),
    ) as cur:
        rows = await cur.fetchall()
    return [_row_to_court(r) for r in rows]


async def update_court(
    court_id: UUID,
    *,
    name: str,
    sport_type: str,
    price_per_hour: float,
    surface: str,
) -> Court | None:
    """Replace a court's editable attributes."""
    db = get_db()
    async with _write_lock:
        try:
            await db.execute(
                """
                UPDATE courts SET name = ?, sport_type = ?, price_per_hour = ?, surface = ?
                WHERE id = ?
                """,
                (name, sport_type, price_per_hour, surface, str(court_id)),
            )
        except aiosqlite.IntegrityError:
            await db.rollback()
            raise
        await db.commit()
    return await get_court(court_id)


async def delete_court(court_id: UUID) -> bool:
    """Delete a court and its bookings. Returns True if a row was deleted."""
    db = get_db()
    async with _write_lock:
        cur = await db.execute("DELETE FROM courts WHERE id = ?", (str(court_id),))
        await db.commit()
    return cur.rowcount > 0


# ══════════════════════════════════════════════════════════════════════════
#                    BOOKING REPOSITORY
# ══════════════════════════════════════════════════════════════════════════

_BOOKING_SELECT = """
SELECT b.*, c.name AS court_name
FROM bookings b JOIN courts c ON c.id = b.court_id
"""


async def insert_booking_if_free(
    court_id: UUID,
    owner_id: UUID,
    customer_name: str,
    start_time: datetime,
    end_time: datetime,
    amount: float,
    status: BookingStatus,
) -> Booking | None:
    """
    Insert a booking unless a non-cancelled booking on the same court
    overlaps ``[start_time, end_time)``.

    The overlap check and the insert are one statement, so SQLite's write
    lock makes them atomic. Returns None when the slot is taken.
    """
    db = get_db()
    booking_id = str(uuid4())
    start, end = _ts(start_time), _ts(end_time)
    async with _write_lock:
        cur = await db.execute(
            """
            INSERT INTO bookings
                (id, court_id, owner_id, customer_name, start_time, end_time,
                 amount, status, created_at)
            SELECT ?, ?, ?, ?, ?, ?, ?, ?, ?
            WHERE NOT EXISTS (
                SELECT 1 FROM bookings
                WHERE court_id = ?
                  AND status != ?
                  AND start_time < ?
                  AND end_time > ?
            )
            """,
            (
                booking_id, str(court_id), str(owner_id), customer_name,
                start, end, amount, status.value, _ts(_now()),
                str(court_id), BookingStatus.CANCELLED.value, end, start,
            ),
        )
        await db.commit()
    if cur.rowcount == 0:
        return None
    return await get_booking(UUID(booking_id))


async def get_booking(booking_id: UUID) -> Booking | None:
    """Fetch a single booking (with its court name) by ID."""
    db = get_db()
    async with db.execute(
        _BOOKING_SELECT + " WHERE b.id = ?", (str(booking_id),)
    ) as cur:
        row = await cur.fetchone()
    return _row_to_booking(row) if row else None


async def list_bookings(
    owner_id: UUID,
    *,
    court_id: UUID | None = None,
    status: BookingStatus | None = None,
) -> list[Booking]:
    """List bookings recorded by *owner_id*, newest first."""
    db = get_db()
    sql = _BOOKING_SELECT + " WHERE b.owner_id = ?"
    params: list = [str(owner_id)]

    if court_id is not None:
        sql += " AND b.court_id = ?"
        params.append(str(court_id))
    if status is not None:
        sql += " AND b.status = ?"
        params.append(status.value)

    sql += " ORDER BY b.created_at DESC, b.rowid DESC"

    async with db.execute(sql, params) as cur:
        rows = await cur.fetchall()
    return [_row_to_booking(r) for r in rows]


async def list_occupied_ranges(
    court_id: UUID,
    window_start: datetime,
    window_end: datetime,
) -> list[tuple[datetime, datetime]]:
    """Return ``(start, end)`` of non-cancelled bookings overlapping the window."""
    db = get_db()
    async with db.execute(
        """
        SELECT start_time, end_time FROM bookings
        WHERE court_id = ?
          AND status != ?
          AND start_time < ?
          AND end_time > ?
        ORDER BY start_time
        """,
        (
            str(court_id),
            BookingStatus.CANCELLED.value,
            _ts(window_end),
            _ts(window_start),
        ),
    ) as cur:
        rows = await cur.fetchall()
    return [(_parse_ts(r["start_time"]), _parse_ts(r["end_time"])) for r in rows]


async def set_booking_status(booking_id: UUID, status: BookingStatus) -> Booking | None:
    """Update a booking's status and return the updated record."""
    db = get_db()
    async with _write_lock:
        await db.execute(
            "UPDATE bookings SET status = ? WHERE id = ?",
            (status.value, str(booking_id)),
        )
        await db.commit()
    return await get_booking(booking_id)

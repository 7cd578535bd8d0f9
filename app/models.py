"""Pydantic models for the Court Booking API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class BookingStatus(str, Enum):
    """Advisory booking status. Only ``Cancelled`` frees the timeline."""

    CONFIRMED = "Confirmed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


# ── Identity ──────────────────────────────────────────────────────────────


class UserInfo(BaseModel):
    """Authenticated user information."""
    id: UUID = Field(..., description="Unique user identifier")
    email: EmailStr = Field(..., description="User email address")
    created_at: datetime = Field(..., description="Account creation timestamp")


class Session(BaseModel):
    """
    Identity context passed explicitly into operations that need a caller.

    An anonymous session has no ``user_id``.
    """
    model_config = ConfigDict(frozen=True)

    user_id: UUID | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> Session:
        return cls()

    @classmethod
    def for_user(cls, user: UserInfo) -> Session:
        return cls(user_id=user.id, email=user.email)


class OtpRequest(BaseModel):
    email: EmailStr = Field(..., description="Email to send the one-time password to")


class OtpRequestResponse(BaseModel):
    message: str
    expires_in_seconds: int


class OtpVerifyRequest(BaseModel):
    email: EmailStr
    otp_code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")


class AuthResponse(BaseModel):
    message: str
    token: str = Field(..., description="Bearer token for the Authorization header")
    expires_in_seconds: int
    user: UserInfo


class MessageResponse(BaseModel):
    message: str


# ── Courts ────────────────────────────────────────────────────────────────


class CourtCreate(BaseModel):
    """Request to create a court."""
    name: str = Field(..., min_length=1, max_length=100, description="Court name, unique per owner")
    sport_type: str = Field(..., min_length=1, max_length=50, description="Sport played on the court")
    price_per_hour: float = Field(..., gt=0, description="Hourly price")
    surface: str = Field(default="Synthetic", min_length=1, max_length=50, description="Surface material")


class CourtUpdate(CourtCreate):
    """Request to replace a court's editable attributes."""


class Court(BaseModel):
    """Court owned by a venue owner."""
    id: UUID = Field(..., description="Unique court identifier")
    owner_id: UUID = Field(..., description="Owning user")
    name: str = Field(..., description="Court name")
    sport_type: str = Field(..., description="Sport played on the court")
    price_per_hour: float = Field(..., description="Hourly price")
    surface: str = Field(..., description="Surface material")
    created_at: datetime = Field(..., description="Creation timestamp")


class CourtListResponse(BaseModel):
    courts: list[Court]


# ── Availability ──────────────────────────────────────────────────────────


class TimeRange(BaseModel):
    """Half-open occupied range ``[start_time, end_time)``."""
    start_time: datetime
    end_time: datetime


class AvailabilityRequest(BaseModel):
    court_id: UUID = Field(..., description="Court to inspect")
    start_time: datetime = Field(..., description="Window start (inclusive)")
    end_time: datetime = Field(..., description="Window end (exclusive)")


class AvailabilityResponse(BaseModel):
    court_id: UUID
    bookings: list[TimeRange] = Field(..., description="Occupied ranges overlapping the window")


# ── Bookings ──────────────────────────────────────────────────────────────


class BookingCreate(BaseModel):
    """Request to record a booking on an owned court."""
    court_id: UUID
    start_time: datetime
    end_time: datetime
    customer_name: str = Field(..., max_length=200)
    amount: float = Field(default=0, ge=0)


class Booking(BaseModel):
    """Persisted booking, including the court's name for display."""
    id: UUID
    court_id: UUID
    court_name: str
    owner_id: UUID
    customer_name: str
    start_time: datetime
    end_time: datetime
    amount: float
    status: BookingStatus
    created_at: datetime


class BookingListResponse(BaseModel):
    bookings: list[Booking]


# ── Misc ──────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current timestamp")

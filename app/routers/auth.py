"""
Authentication endpoints – email OTP flow issuing expiring JWTs.
"""

import secrets

from fastapi import APIRouter, Request, Response

from app import db
from app.config import JWT_EXPIRY_HOURS, OTP_TTL_SECONDS
from app.dependencies import CurrentUser, create_jwt, create_session_cookie
from app.errors import Unauthorized
from app.models import (
    AuthResponse,
    MessageResponse,
    OtpRequest,
    OtpRequestResponse,
    OtpVerifyRequest,
    UserInfo,
)
from app.rate_limit import AUTH, STRICT, limiter
from app.services.email import send_otp_email

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/request-otp",
    response_model=OtpRequestResponse,
    operation_id="requestOtp",
    summary="Request a one-time password sent to the given email",
)
@limiter.limit(STRICT)
async def request_otp(request: Request, body: OtpRequest) -> OtpRequestResponse:
    """
    Generate a 6-digit OTP, store it in the database, and send it via email.
    In dev mode (no SMTP configured), the OTP is logged to the console.
    """
    otp_code = f"{secrets.randbelow(1_000_000):06d}"
    await db.create_otp(body.email, otp_code, ttl_seconds=OTP_TTL_SECONDS)
    await send_otp_email(body.email, otp_code)

    return OtpRequestResponse(
        message=f"OTP sent to {body.email}",
        expires_in_seconds=OTP_TTL_SECONDS,
    )


@router.post(
    "/verify-otp",
    response_model=AuthResponse,
    operation_id="verifyOtp",
    summary="Verify OTP and receive a bearer token",
)
@limiter.limit(AUTH)
async def verify_otp(request: Request, body: OtpVerifyRequest, response: Response) -> AuthResponse:
    """
    Validate the OTP. On success, return a signed JWT in the body (for the
    Authorization header) and also set it as an HTTP-only cookie.
    """
    valid = await db.verify_otp(body.email, body.otp_code)
    if not valid:
        raise Unauthorized("Invalid or expired OTP")

    user = await db.get_or_create_user(body.email)
    token = create_jwt(user)
    create_session_cookie(response, token)

    return AuthResponse(
        message="Authenticated successfully",
        token=token,
        expires_in_seconds=JWT_EXPIRY_HOURS * 3600,
        user=user,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    operation_id="logout",
    summary="Clear the session cookie",
)
async def logout(current_user: CurrentUser, response: Response) -> MessageResponse:
    # Tokens are not revoked; they lapse at their expiry.
    response.delete_cookie("session")
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=UserInfo,
    operation_id="getMe",
    summary="Get current authenticated user info",
)
async def get_me(current_user: CurrentUser) -> UserInfo:
    return current_user

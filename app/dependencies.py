import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Cookie, Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import ENVIRONMENT, JWT_ALGORITHM, JWT_EXPIRY_HOURS, JWT_SECRET
from app.errors import Unauthorized
from app.models import Session, UserInfo

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


# ── JWT / Session ──────────────────────────────────────────────────────────


def create_jwt(user: UserInfo) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXPIRY_HOURS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key="session",
        value=token,
        httponly=True,
        samesite="lax",
        secure=ENVIRONMENT == "production",
        max_age=JWT_EXPIRY_HOURS * 3600,
    )


def decode_token(token: str) -> UserInfo:
    """Turn a bearer token into a user identity, or raise Unauthorized."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Session expired. Please log in again.") from None
    except jwt.PyJWTError:
        raise Unauthorized("Invalid session. Please log in again.") from None

    sub: str | None = payload.get("sub")
    email: str | None = payload.get("email")
    try:
        user_id = UUID(sub) if sub else None
    except ValueError:
        user_id = None
    if user_id is None or not email:
        raise Unauthorized("Invalid token payload.")

    return UserInfo(
        id=user_id,
        email=email,
        created_at=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)] = None,
    session: Annotated[str | None, Cookie()] = None,
) -> UserInfo:
    """Authenticate from ``Authorization: Bearer`` first, then the session cookie."""
    token = credentials.credentials if credentials else session
    if not token:
        raise Unauthorized(
            "Authentication required. Please log in via /api/auth/verify-otp",
        )
    return decode_token(token)


CurrentUser = Annotated[UserInfo, Depends(get_current_user)]


async def get_session(current_user: CurrentUser) -> Session:
    return Session.for_user(current_user)


CurrentSession = Annotated[Session, Depends(get_session)]

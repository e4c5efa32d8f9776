"""Signed cookie sessions for the admin panel and content preview mode.

Cookie values are HS256 tokens signed with SESSION_SECRET, so the
browser can hold the state but cannot forge it.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request
from fastapi.responses import Response

from .config import Config


logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

ADMIN_SESSION_COOKIE = "admin-session"
ADMIN_SESSION_MAX_AGE = 60 * 60 * 24  # 24 hours
DEV_ADMIN_PASSWORD = "admin123"

PREVIEW_SESSION_COOKIE = "__preview"
PREVIEW_SESSION_MAX_AGE = 60 * 60 * 8


def _encode(claims: dict, max_age: int) -> str:
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(seconds=max_age)
    return jwt.encode(payload, Config.session_secret(), algorithm=ALGORITHM)


def _decode(token: Optional[str], scope: str) -> Optional[dict]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, Config.session_secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected {scope} session cookie: {e}")
        return None
    if payload.get("scope") != scope:
        return None
    return payload


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=not Config.is_development(),
        samesite="lax",
    )


def _clear_cookie(response: Response, name: str) -> None:
    response.delete_cookie(
        key=name,
        path="/",
        httponly=True,
        secure=not Config.is_development(),
        samesite="lax",
    )


def verify_admin_password(password: Optional[str]) -> bool:
    """Compare against ADMIN_PASSWORD; the dev default only applies in development."""
    if not password:
        return False
    expected = Config.ADMIN_PASSWORD.strip()
    if not expected:
        if not Config.is_development():
            logger.error("ADMIN_PASSWORD is not configured; admin login disabled")
            return False
        expected = DEV_ADMIN_PASSWORD
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def is_admin_authenticated(request: Request) -> bool:
    payload = _decode(request.cookies.get(ADMIN_SESSION_COOKIE), "admin")
    return bool(payload and payload.get("authenticated") is True)


def create_admin_session(response: Response) -> None:
    token = _encode({"scope": "admin", "authenticated": True}, ADMIN_SESSION_MAX_AGE)
    _set_cookie(response, ADMIN_SESSION_COOKIE, token, ADMIN_SESSION_MAX_AGE)


def clear_admin_session(response: Response) -> None:
    _clear_cookie(response, ADMIN_SESSION_COOKIE)


def is_preview(request: Request) -> bool:
    payload = _decode(request.cookies.get(PREVIEW_SESSION_COOKIE), "preview")
    return bool(payload and payload.get("preview") is True)


def enable_preview(response: Response) -> None:
    token = _encode({"scope": "preview", "preview": True}, PREVIEW_SESSION_MAX_AGE)
    _set_cookie(response, PREVIEW_SESSION_COOKIE, token, PREVIEW_SESSION_MAX_AGE)


def disable_preview(response: Response) -> None:
    _clear_cookie(response, PREVIEW_SESSION_COOKIE)

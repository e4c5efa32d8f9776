"""Request identity: Clerk-authenticated investors and the admin session.

Investor requests carry a Clerk session token, either as a bearer token
or in the `__session` cookie Clerk's front-end SDK sets. Tokens are RS256
JWTs verified against CLERK_JWT_KEY (PEM) or the instance JWKS.
"""

import logging
from functools import lru_cache
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request

from .config import Config
from .sessions import is_admin_authenticated


logger = logging.getLogger(__name__)

CLERK_SESSION_COOKIE = "__session"


@lru_cache(maxsize=1)
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url, cache_keys=True)


def _signing_key(token: str):
    if Config.CLERK_JWT_KEY:
        return Config.CLERK_JWT_KEY.replace("\\n", "\n")
    if Config.CLERK_JWKS_URL:
        return _jwks_client(Config.CLERK_JWKS_URL).get_signing_key_from_jwt(token).key
    raise RuntimeError("Clerk is not configured: set CLERK_JWT_KEY or CLERK_JWKS_URL")


def verify_session_token(token: str) -> dict:
    """Verify a Clerk session token and return its claims.

    Raises:
        jwt.InvalidTokenError: token is malformed, expired or not signed by Clerk
    """
    options = {"require": ["exp", "sub"]}
    kwargs = {"issuer": Config.CLERK_ISSUER} if Config.CLERK_ISSUER else {}
    return jwt.decode(
        token,
        _signing_key(token),
        algorithms=["RS256"],
        options=options,
        **kwargs,
    )


def _extract_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(CLERK_SESSION_COOKIE)


def get_current_user_id(request: Request) -> Optional[str]:
    """Clerk user id of the caller, or None when absent or invalid."""
    token = _extract_token(request)
    if not token:
        return None
    try:
        claims = verify_session_token(token)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected investor session token: {e}")
        return None
    except jwt.PyJWKClientError as e:
        logger.error(f"Failed to fetch Clerk signing keys: {e}")
        return None
    return claims.get("sub")


def require_user_id(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def require_admin(request: Request) -> None:
    """Admin pages: bounce unauthenticated visitors to the login page."""
    if not is_admin_authenticated(request):
        raise HTTPException(status_code=303, detail="Admin login required", headers={"Location": "/admin/login"})


def require_admin_api(request: Request) -> None:
    """Admin JSON endpoints: plain 401 instead of a redirect."""
    if not is_admin_authenticated(request):
        raise HTTPException(status_code=401, detail="Admin authentication required")

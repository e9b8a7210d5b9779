"""
Authentication Utility - session cookie and route guards.

Provides:
- The `sid` cookie helpers
- FastAPI dependencies that resolve the logged-in identity
- Role guards for company / employer routes and the admin key guard
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, Response, status
from pymongo.errors import PyMongoError

from app.core.config import get_settings
from app.core.container import Services
from app.schemas.schemas import AccountType, SessionIdentity

logger = logging.getLogger(__name__)

settings = get_settings()

NOT_AUTHENTICATED = "User isn't authenticated"
NO_PERMISSION = "User doesn't have permission"
INVALID_ADMIN_KEY = "Invalid admin key"


def get_services(request: Request) -> Services:
    return request.app.state.services


def set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sid,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or None


async def get_session_identity(
    request: Request, services: Services = Depends(get_services)
) -> Optional[SessionIdentity]:
    """
    FastAPI dependency - identity behind the `sid` cookie, or None.

    The account is reloaded on every request; a session whose account was
    deleted (e.g. a rejected registration) is destroyed.
    """
    sid = get_session_id(request)
    if sid is None:
        return None

    try:
        identity = services.sessions.get(sid)
    except PyMongoError:
        logger.exception("Session lookup failed")
        return None

    if identity is None:
        return None

    account = services.accounts(identity.type).deserialize(identity.id)
    if account.status == status.HTTP_404_NOT_FOUND:
        try:
            services.sessions.destroy(sid)
        except PyMongoError:
            logger.exception("Destroying stale session failed")
        return None
    if not account.success:
        return None

    return identity


async def require_authenticated(
    identity: Optional[SessionIdentity] = Depends(get_session_identity),
) -> SessionIdentity:
    """Dependency - any logged-in company or employer."""
    if identity is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_AUTHENTICATED)
    return identity


def require_role(account_type: AccountType):
    """Build a dependency that only lets `account_type` sessions through."""

    async def dependency(identity: SessionIdentity = Depends(require_authenticated)) -> SessionIdentity:
        if identity.type != account_type:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NO_PERMISSION)
        return identity

    return dependency


require_company = require_role(AccountType.company)
require_employer = require_role(AccountType.employer)


async def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    """Dependency - admin endpoints need the X-Admin-Key header."""
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_ADMIN_KEY)

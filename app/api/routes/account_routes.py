"""
Account Routes - shared by companies and employers

POST /register - Register account + approval request
POST /login - Local login, sets the `sid` cookie
POST /logout - Destroy the session, clear the cookie
GET /current - Identity of the logged-in account
POST /registration-approvals/{approval_id}/image - Upload registration proof image
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Request, UploadFile
from pymongo.errors import PyMongoError

from app.api.responses import envelope, failure
from app.core.auth import (
    clear_session_cookie, get_services, get_session_id, get_session_identity, set_session_cookie,
)
from app.core.container import Services
from app.models import AuthOutcome, ServiceResult
from app.schemas.schemas import AccountType, LoginRequest, SessionIdentity
from app.utils.file_upload import read_registration_image

logger = logging.getLogger(__name__)

CREDENTIAL_MISSING = "Credential is missing"
LOGIN_FAILED = "Something went wrong when logging in"
LOGOUT_FAILED = "Something went wrong when logging out"


def start_session(request: Request, services: Services, outcome: AuthOutcome) -> Optional[str]:
    """Replace any existing session with a fresh one for the authenticated identity."""
    old_sid = get_session_id(request)
    try:
        if old_sid:
            services.sessions.destroy(old_sid)
        return services.sessions.create(outcome.identity)
    except PyMongoError:
        logger.exception("Creating session for %s failed", outcome.identity.id)
        return None


def build_account_router(account_type: AccountType, prefix: str, tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    strategy_name = f"local-{account_type.value.lower()}"

    @router.post("/register", status_code=201)
    def register(form: Dict[str, Any] = Body(...), services: Services = Depends(get_services)):
        """Register a new account. It can't log in until an admin approves it."""
        return envelope(services.accounts(account_type).register(form))

    @router.post("/login")
    def login(
        request: Request,
        credentials: LoginRequest,
        services: Services = Depends(get_services),
    ):
        """Log in with official name or email + password."""
        outcome = services.strategy(strategy_name).authenticate(credentials.username, credentials.password)
        if outcome.error:
            return failure(403, outcome.message)
        if not outcome.authenticated:
            return failure(401, outcome.message)

        sid = start_session(request, services, outcome)
        if sid is None:
            return failure(403, LOGIN_FAILED)

        logger.info("%s %s logged in", account_type.value, outcome.identity.id)
        response = envelope(ServiceResult.ok(outcome.message, outcome.identity))
        set_session_cookie(response, sid)
        return response

    @router.post("/logout")
    async def logout(
        request: Request,
        identity: Optional[SessionIdentity] = Depends(get_session_identity),
        services: Services = Depends(get_services),
    ):
        checked = services.accounts(account_type).check_current(identity)
        if not checked.success:
            return envelope(checked)

        try:
            services.sessions.destroy(get_session_id(request))
        except PyMongoError:
            logger.exception("Destroying session for %s failed", identity.id)
            return failure(403, LOGOUT_FAILED)

        response = envelope(ServiceResult.ok("Successfully logged out", checked.data))
        clear_session_cookie(response)
        return response

    @router.get("/current")
    async def get_current(
        identity: Optional[SessionIdentity] = Depends(get_session_identity),
        services: Services = Depends(get_services),
    ):
        return envelope(services.accounts(account_type).get_current(identity))

    @router.post("/registration-approvals/{approval_id}/image", status_code=201)
    async def upload_registration_image(
        approval_id: str,
        image: UploadFile = File(...),
        services: Services = Depends(get_services),
    ):
        """
        Upload the registration proof image (JPEG/PNG, max 3MB).
        No login needed: the account isn't approved yet.
        """
        approval_id = approval_id.strip()
        if not approval_id:
            return failure(400, CREDENTIAL_MISSING)

        uploaded = await read_registration_image(image)
        return envelope(services.accounts(account_type).upload_registration_image(approval_id, uploaded))

    return router

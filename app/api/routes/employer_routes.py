"""
Employer Routes

POST /employers/register - Register employer + approval request
POST /employers/login - Login, sets the `sid` cookie
POST /employers/logout - Logout
GET /employers/current - Current employer session
POST /employers/registration-approvals/{approval_id}/image - Upload registration image
GET /employers/auth/google - Start Google sign-in
GET /employers/auth/google/callback - Google sign-in callback, redirects to the frontend
"""

import logging
from urllib.parse import urlencode

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse

from app.api.routes.account_routes import build_account_router, start_session
from app.core.auth import get_services, set_session_cookie
from app.core.config import get_settings
from app.core.container import Services
from app.schemas.schemas import AccountType

logger = logging.getLogger(__name__)

settings = get_settings()

router = build_account_router(AccountType.employer, "/employers", "Employers")


def redirect_to_frontend(path: str, msg: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"{settings.frontend_base_url}{path}?{urlencode({'msg': msg})}",
        status_code=302,
    )


@router.get("/auth/google")
async def google_login(request: Request, services: Services = Depends(get_services)):
    """Redirect to Google's consent screen."""
    return await services.strategy("google-employer").begin(request)


@router.get("/auth/google/callback")
async def google_callback(request: Request, services: Services = Depends(get_services)):
    """
    Finish Google sign-in.

    Failure: {frontend}/login?msg=<reason>
    Success: {frontend}?msg=success with the `sid` cookie set
    """
    outcome = await services.strategy("google-employer").authenticate(request)
    if not outcome.authenticated:
        logger.info("Google sign-in refused: %s", outcome.message)
        return redirect_to_frontend("/login", outcome.message)

    sid = start_session(request, services, outcome)
    if sid is None:
        return redirect_to_frontend("/login", "login")

    logger.info("Employer %s logged in with Google", outcome.identity.id)
    response = redirect_to_frontend("", "success")
    set_session_cookie(response, sid)
    return response

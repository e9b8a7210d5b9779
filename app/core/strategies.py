"""
Authentication strategies.

Each strategy checks credentials one way and hands back an AuthOutcome;
the login routes turn a successful outcome into a session.

- local-company / local-employer: official name or email + password
- google-employer: Google OpenID Connect through authlib
"""

import logging

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from app.models import AuthOutcome
from app.schemas.schemas import GoogleProfile
from app.services.account_service import AccountService, EmployerService

logger = logging.getLogger(__name__)

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"
EMAIL_NOT_VERIFIED = "Google email isn't verified"


class LocalStrategy:
    def __init__(self, service: AccountService):
        self.service = service

    def authenticate(self, username: str, password: str) -> AuthOutcome:
        return self.service.authenticate(username, password)


class GoogleOAuthClient:
    """authlib client registered for Google with the openid/email/profile scopes."""

    def __init__(self, client_id: str, client_secret: str):
        self.oauth = OAuth()
        self.oauth.register(
            name="google",
            client_id=client_id,
            client_secret=client_secret,
            server_metadata_url=GOOGLE_DISCOVERY_URL,
            client_kwargs={"scope": "openid email profile"},
        )

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        return await self.oauth.google.authorize_redirect(request, redirect_uri)

    async def fetch_userinfo(self, request: Request) -> dict:
        token = await self.oauth.google.authorize_access_token(request)
        userinfo = token.get("userinfo")
        if userinfo is None:
            userinfo = await self.oauth.google.userinfo(token=token)
        return dict(userinfo)


class GoogleStrategy:
    def __init__(self, service: EmployerService, client: GoogleOAuthClient, redirect_uri: str):
        self.service = service
        self.client = client
        self.redirect_uri = redirect_uri

    async def begin(self, request: Request) -> Response:
        """Redirect the browser to Google's consent screen."""
        return await self.client.authorize_redirect(request, self.redirect_uri)

    async def authenticate(self, request: Request) -> AuthOutcome:
        """Finish the callback: exchange the code, then sign the employer in."""
        try:
            userinfo = await self.client.fetch_userinfo(request)
            profile = GoogleProfile(
                sub=userinfo["sub"], email=userinfo["email"], name=userinfo.get("name")
            )
        except (OAuthError, httpx.HTTPError, KeyError, ValidationError):
            logger.exception("Google sign-in callback failed")
            return AuthOutcome.failed()

        if userinfo.get("email_verified") is False:
            return AuthOutcome.rejected(EMAIL_NOT_VERIFIED)

        return self.service.google_login(profile)

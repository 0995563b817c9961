"""Google identity verification for federated sign-in."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from app.config import get_settings
from app.errors import InvalidProviderTokenError

logger = logging.getLogger("tourism_api")

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


@dataclass
class ProviderProfile:
    """Identity asserted by Google."""

    federated_id: str
    email: str
    name: str
    picture_url: str | None = None


class GoogleIdentityService:
    """Verifies Google ID tokens and runs the authorization-code exchange."""

    def __init__(self, client_id: str, client_secret: str = "", redirect_uri: str = "") -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

    def verify_id_token(self, token: str) -> ProviderProfile:
        """Verify a Google ID token against Google's keys and our client id."""
        if not self.client_id:
            raise InvalidProviderTokenError("Google sign-in is not configured")

        try:
            idinfo = id_token.verify_oauth2_token(token, google_requests.Request(), self.client_id)
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.info("Rejected Google ID token: %s", e)
            raise InvalidProviderTokenError() from None

        email = idinfo.get("email")
        if not idinfo.get("sub") or not email:
            raise InvalidProviderTokenError("Google token is missing identity claims")

        return ProviderProfile(
            federated_id=idinfo["sub"],
            email=email,
            name=idinfo.get("name") or email.split("@")[0],
            picture_url=idinfo.get("picture"),
        )

    def get_authorization_url(self, state: str) -> str:
        """Build the Google consent-screen URL for the redirect flow."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> ProviderProfile:
        """Trade an authorization code for tokens and verify the returned ID token."""
        if not self.client_id or not self.client_secret:
            raise InvalidProviderTokenError("Google sign-in is not configured")

        try:
            response = httpx.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                timeout=10.0,
            )
        except httpx.HTTPError as e:
            logger.error("Google token exchange failed: %s", e)
            raise InvalidProviderTokenError("Could not reach Google") from None

        if response.status_code != 200:
            logger.info("Google rejected authorization code (%d)", response.status_code)
            raise InvalidProviderTokenError("Invalid authorization code")

        raw_id_token = response.json().get("id_token")
        if not raw_id_token:
            raise InvalidProviderTokenError("Google response did not include an ID token")
        return self.verify_id_token(raw_id_token)


_google_service: GoogleIdentityService | None = None


def get_google_service() -> GoogleIdentityService:
    """Get singleton Google identity service instance."""
    global _google_service
    if _google_service is None:
        settings = get_settings()
        _google_service = GoogleIdentityService(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
        )
    return _google_service

"""Google OAuth 2.0 adapter (authorization code flow)."""

from __future__ import annotations

import html
import logging
from urllib.parse import urlencode

import httpx

from atelier.application.ports import ExternalProfile
from atelier.domain.shared.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # NOQA: S105
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


def _json_object(response: httpx.Response) -> dict:
    payload = response.json()
    if not isinstance(payload, dict):
        msg = f"expected a JSON object from {response.url}"
        raise ValueError(msg)
    return payload


class GoogleOAuthClient:
    """Talks to Google's OAuth endpoints.

    Parameters
    ----------
    client_id
        OAuth client id from the Google console
    client_secret
        Matching client secret
    redirect_uri
        Callback URL registered with Google
    timeout
        Seconds to wait for each Google request
    http_client
        Optional pre-built client (tests pass one with a mock transport)
    """

    SCOPES = ("openid", "email", "profile")

    def __init__(  # NOQA: PLR0913
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._timeout = timeout
        self._http_client = http_client

    def authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "scope": " ".join(self.SCOPES),
                "state": state,
                "prompt": "select_account",
            },
        )
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    async def exchange_and_verify(self, code: str) -> ExternalProfile:
        if not code:
            msg = "Google authentication failed"
            raise UnauthorizedError(msg)

        try:
            if self._http_client is not None:
                userinfo = await self._fetch_userinfo(self._http_client, code)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    userinfo = await self._fetch_userinfo(client, code)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google returned error %d: %s",
                e.response.status_code,
                e.response.text[:200] if e.response.text else "no body",
            )
            msg = "Google authentication failed"
            raise UnauthorizedError(msg) from e
        except httpx.HTTPError as e:
            logger.warning("Google request failed (%s): %s", type(e).__name__, e)
            msg = "Google authentication failed"
            raise UnauthorizedError(msg) from e
        except ValueError as e:
            logger.warning("Google sent an unreadable response: %s", e)
            msg = "Google authentication failed"
            raise UnauthorizedError(msg) from e

        return self._to_profile(userinfo)

    async def _fetch_userinfo(self, client: httpx.AsyncClient, code: str) -> dict:
        token_response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        token_response.raise_for_status()
        access_token = _json_object(token_response).get("access_token")
        if not access_token:
            msg = "Google token response did not contain an access token"
            raise UnauthorizedError(msg)

        userinfo_response = await client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        userinfo_response.raise_for_status()
        return _json_object(userinfo_response)

    def _to_profile(self, userinfo: dict) -> ExternalProfile:
        subject = userinfo.get("sub")
        email = userinfo.get("email")
        if not subject or not email:
            msg = "Google profile is missing an id or email"
            raise UnauthorizedError(msg)
        if not userinfo.get("email_verified", False):
            logger.warning("Google account with unverified email: %s", email)
            msg = "Google account email is not verified"
            raise UnauthorizedError(msg)

        return ExternalProfile(
            subject_id=str(subject),
            email=email,
            name=html.escape(userinfo.get("name") or "", quote=True),
            avatar_url=userinfo.get("picture"),
        )

# backend/market_sum/services/google_oauth.py
from __future__ import annotations

from urllib.parse import urlencode

import httpx

from market_sum.exceptions import AuthenticationError
from market_sum.logger import get_logger
from market_sum.schemas.auth import GoogleUser

log = get_logger(__name__)


class GoogleOAuthClient:
    """Authorization-code flow against Google: build the consent URL, trade the code for a profile."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        auth_url: str,
        token_url: str,
        userinfo_url: str,
        timeout: float = 10.0,
    ):
        self.client = client
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "online",
            "state": state,
        }
        return f"{self.auth_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleUser:
        try:
            r = await self.client.post(
                self.token_url,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                timeout=self.timeout,
            )
            r.raise_for_status()
            access_token = (r.json() or {}).get("access_token")
            if not access_token:
                raise AuthenticationError("Google token response had no access_token")

            r = await self.client.get(
                self.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            r.raise_for_status()
            info = r.json() or {}
        except httpx.HTTPError as e:
            log.error("Google OAuth exchange failed: %s", e)
            raise AuthenticationError("Google authentication failed") from e
        except ValueError as e:
            raise AuthenticationError("Google returned invalid JSON") from e

        if not info.get("sub") or not info.get("email"):
            raise AuthenticationError("Google profile is missing id or email")

        return GoogleUser(
            id=str(info["sub"]),
            email=info["email"],
            first_name=info.get("given_name") or "",
            last_name=info.get("family_name") or "",
            picture=info.get("picture"),
        )

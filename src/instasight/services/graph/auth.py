"""Facebook OAuth login flow."""

import secrets
import time
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from instasight.config import Settings, get_settings
from instasight.models.session import FacebookPageOption
from instasight.services.graph.client import FacebookGraphError, raise_for_graph_error


@dataclass
class TokenGrant:
    """User access token returned by the code exchange."""

    access_token: str
    token_type: str
    expires_at: Optional[int]


class FacebookAuth:
    """Handle the Facebook OAuth dialog, code exchange and page discovery."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.settings = settings or get_settings()
        self._client = http_client

    @staticmethod
    def generate_state() -> str:
        """Generate a random anti-CSRF state token."""
        return secrets.token_hex(16)

    def get_authorization_url(self, redirect_uri: str, state: str) -> str:
        """Build the OAuth dialog URL."""
        params = {
            "client_id": self.settings.facebook_app_id,
            "redirect_uri": redirect_uri,
            "scope": self.settings.facebook_scopes,
            "response_type": "code",
            "state": state,
        }
        return f"{self.settings.oauth_dialog_url}?{urlencode(params)}"

    def _get(self, path: str, params: dict[str, Any], fallback_message: str) -> dict[str, Any]:
        url = f"{self.settings.graph_base_url}/{path}"
        if self._client is not None:
            response = self._client.get(url, params=params)
        else:
            with httpx.Client(timeout=30.0) as client:
                response = client.get(url, params=params)

        raise_for_graph_error(response, fallback_message)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise FacebookGraphError(
                fallback_message,
                status_code=response.status_code,
                response_body=response.text,
            )
        return data

    def exchange_code_for_token(
        self,
        code: str,
        redirect_uri: str,
        now: Optional[float] = None,
    ) -> TokenGrant:
        """Exchange an authorization code for a user access token."""
        data = self._get(
            "oauth/access_token",
            {
                "client_id": self.settings.facebook_app_id,
                "redirect_uri": redirect_uri,
                "client_secret": self.settings.facebook_app_secret,
                "code": code,
            },
            "Failed to exchange authorization code",
        )

        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise FacebookGraphError(
                "Failed to exchange authorization code",
                status_code=502,
                payload=data,
            )

        expires_in = data.get("expires_in")
        if not isinstance(expires_in, (int, float)) or isinstance(expires_in, bool):
            expires_in = 0
        now = time.time() if now is None else now
        expires_at = int(now) + int(expires_in) if expires_in > 0 else None

        return TokenGrant(
            access_token=access_token,
            token_type=data.get("token_type", "bearer"),
            expires_at=expires_at,
        )

    def get_instagram_pages(self, user_access_token: str) -> list[FacebookPageOption]:
        """List the user's Pages that are linked to an Instagram business account."""
        data = self._get(
            "me/accounts",
            {
                "access_token": user_access_token,
                "fields": "id,name,access_token,instagram_business_account",
            },
            "Failed to list Facebook pages",
        )

        pages = []
        for page in data.get("data") or []:
            if not isinstance(page, dict):
                continue
            account = page.get("instagram_business_account")
            instagram_id = account.get("id") if isinstance(account, dict) else None
            if not instagram_id or not page.get("id") or not page.get("access_token"):
                continue
            pages.append(
                FacebookPageOption(
                    page_id=str(page["id"]),
                    page_name=str(page.get("name") or ""),
                    page_access_token=str(page["access_token"]),
                    instagram_business_id=str(instagram_id),
                )
            )
        return pages

"""Facebook session bundles stored in cookies."""

import base64
import json
import time
from typing import Optional, TypeVar

from pydantic import Field

from instasight.models.base import CamelModel

T = TypeVar("T", bound=CamelModel)


class FacebookPageOption(CamelModel):
    """A Facebook Page linked to an Instagram business account."""

    page_id: str
    page_name: str
    page_access_token: str
    instagram_business_id: str


class FacebookSession(CamelModel):
    """The connected page's token bundle."""

    user_access_token: str
    page_access_token: str
    page_id: str
    page_name: str
    instagram_business_id: str
    expires_at: Optional[int] = None

    @classmethod
    def for_page(
        cls,
        user_access_token: str,
        page: FacebookPageOption,
        expires_at: Optional[int] = None,
    ) -> "FacebookSession":
        """Build a session for the chosen page."""
        return cls(
            user_access_token=user_access_token,
            page_access_token=page.page_access_token,
            page_id=page.page_id,
            page_name=page.page_name,
            instagram_business_id=page.instagram_business_id,
            expires_at=expires_at,
        )

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check whether the user token has passed its expiry time."""
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return self.expires_at <= now


class FacebookPendingSession(CamelModel):
    """Token bundle awaiting a page choice."""

    user_access_token: str
    pages: list[FacebookPageOption] = Field(default_factory=list)
    expires_at: Optional[int] = None

    def find_page(self, page_id: str) -> Optional[FacebookPageOption]:
        """Return the pending page with the given id, if any."""
        for page in self.pages:
            if page.page_id == page_id:
                return page
        return None


def _encode(model: CamelModel) -> str:
    raw = json.dumps(model.to_json_dict(), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode(value: Optional[str], model_cls: type[T]) -> Optional[T]:
    if not value:
        return None

    padded = value + "=" * (-len(value) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return model_cls.model_validate_json(raw.decode("utf-8"))
    except ValueError:
        # binascii, unicode and validation errors all derive from ValueError
        return None


def encode_session(session: FacebookSession) -> str:
    """Encode a session as base64url JSON."""
    return _encode(session)


def decode_session(value: Optional[str]) -> Optional[FacebookSession]:
    """Decode a session cookie value, returning None if it is not valid."""
    return _decode(value, FacebookSession)


def encode_pending_session(session: FacebookPendingSession) -> str:
    """Encode a pending session as base64url JSON."""
    return _encode(session)


def decode_pending_session(value: Optional[str]) -> Optional[FacebookPendingSession]:
    """Decode a pending session cookie value, returning None if it is not valid."""
    return _decode(value, FacebookPendingSession)

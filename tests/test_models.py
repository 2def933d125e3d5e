"""Tests for session and insight models."""

import base64
import json

from instasight.models.insights import AccountInsights, DailyTotals, InstagramMedia, PostSummary
from instasight.models.session import (
    FacebookPageOption,
    FacebookPendingSession,
    FacebookSession,
    decode_pending_session,
    decode_session,
    encode_pending_session,
    encode_session,
)


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip("=")


class TestSessionCodec:
    """Tests for the cookie encoding of session bundles."""

    def test_encode_uses_camel_case_json(self, sample_session):
        """Test the encoded payload is base64url JSON with camelCase keys."""
        value = encode_session(sample_session)

        assert "=" not in value
        padded = value + "=" * (-len(value) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded))

        assert payload["userAccessToken"] == "test_user_token"
        assert payload["pageAccessToken"] == "test_page_token"
        assert payload["pageName"] == "Avocado Cafe"
        assert payload["instagramBusinessId"] == sample_session.instagram_business_id
        assert "expiresAt" not in payload

    def test_decode_round_trip(self, sample_page):
        """Test a session survives encoding and decoding."""
        session = FacebookSession.for_page("user_token", sample_page, expires_at=1_900_000_000)

        assert decode_session(encode_session(session)) == session

    def test_decode_accepts_foreign_encoding(self):
        """Test decoding a bundle written by another client."""
        value = _b64({
            "userAccessToken": "u",
            "pageAccessToken": "p",
            "pageId": "1",
            "pageName": "Shop",
            "instagramBusinessId": "17841",
            "expiresAt": 1700000000,
        })

        session = decode_session(value)

        assert session is not None
        assert session.page_id == "1"
        assert session.expires_at == 1700000000

    def test_decode_invalid_values(self):
        """Test invalid cookie values decode to None."""
        assert decode_session(None) is None
        assert decode_session("") is None
        assert decode_session("not-base64-json!!") is None
        assert decode_session(_b64({"pageId": "1"})) is None
        assert decode_session("ñ") is None

    def test_pending_session_codec(self, sample_page):
        """Test pending sessions keep their page list."""
        pending = FacebookPendingSession(user_access_token="u", pages=[sample_page])

        decoded = decode_pending_session(encode_pending_session(pending))

        assert decoded is not None
        assert decoded.pages == [sample_page]
        assert decode_pending_session("garbage") is None


class TestFacebookSession:
    """Tests for FacebookSession helpers."""

    def test_for_page(self, sample_page):
        """Test building a session from a page option."""
        session = FacebookSession.for_page("user", sample_page, expires_at=123)

        assert session.user_access_token == "user"
        assert session.page_access_token == sample_page.page_access_token
        assert session.page_id == sample_page.page_id
        assert session.instagram_business_id == sample_page.instagram_business_id
        assert session.expires_at == 123

    def test_is_expired(self, sample_session):
        """Test expiry checks."""
        assert sample_session.is_expired(now=10**12) is False

        expiring = sample_session.model_copy(update={"expires_at": 1000})
        assert expiring.is_expired(now=999) is False
        assert expiring.is_expired(now=1000) is True

    def test_find_page(self, sample_page):
        """Test looking up a pending page by id."""
        other = FacebookPageOption(
            page_id="other",
            page_name="Other",
            page_access_token="t",
            instagram_business_id="ig",
        )
        pending = FacebookPendingSession(user_access_token="u", pages=[sample_page, other])

        assert pending.find_page("other") == other
        assert pending.find_page("missing") is None


class TestInsightModels:
    """Tests for insight models."""

    def test_account_insights_json(self):
        """Test account insights keep a null follower count and camelCase rollups."""
        insights = AccountInsights(
            follower_count=None,
            daily_totals={"reach": DailyTotals(last_7_days=5, last_28_days=9)},
        )

        data = insights.to_json_dict()

        assert data["followerCount"] is None
        assert data["dailyTotals"]["reach"]["last7Days"] == 5
        assert data["dailyTotals"]["reach"]["last28Days"] == 9
        assert data["dailyTotals"]["reach"]["timeseries"] == []

    def test_post_summary_from_media(self):
        """Test missing counts become zero."""
        media = InstagramMedia(id="m1", media_type="IMAGE")

        summary = PostSummary.from_media(media)

        assert summary.like_count == 0
        assert summary.comments_count == 0
        assert summary.insights == {}

    def test_media_preview_url_falls_back_to_thumbnail(self):
        """Test preview URL prefers media_url then thumbnail_url."""
        assert InstagramMedia(id="1", thumbnail_url="t").preview_url == "t"
        assert InstagramMedia(id="1", media_url="m", thumbnail_url="t").preview_url == "m"

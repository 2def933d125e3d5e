"""Pytest configuration and fixtures."""

import uuid

import pytest

from instasight.models.session import FacebookPageOption, FacebookSession


@pytest.fixture
def mock_settings():
    """Settings with test credentials, independent of the environment."""
    from instasight.config import Settings

    return Settings(
        _env_file=None,
        facebook_app_id="test_app_id",
        facebook_app_secret="test_app_secret",
        facebook_redirect_uri=None,
        openai_api_key="test_openai_key",
        openai_model="gpt-4o-mini",
        environment="development",
        render_external_url=None,
        render_external_hostname=None,
        graph_api_version="v17.0",
    )


@pytest.fixture
def sample_page():
    """A Facebook page linked to an Instagram business account."""
    unique_id = str(uuid.uuid4().int)[:10]
    return FacebookPageOption(
        page_id=f"page_{unique_id}",
        page_name="Avocado Cafe",
        page_access_token="test_page_token",
        instagram_business_id=f"1784{unique_id}",
    )


@pytest.fixture
def sample_session(sample_page):
    """A connected session for the sample page."""
    return FacebookSession.for_page("test_user_token", sample_page)


@pytest.fixture
def sample_media_payload():
    """Graph API media response data."""
    return [
        {
            "id": "m1",
            "caption": "New seasonal menu",
            "media_type": "IMAGE",
            "media_url": "https://cdn.example.com/m1.jpg",
            "permalink": "https://instagram.com/p/m1",
            "timestamp": "2024-05-01T12:00:00+0000",
            "like_count": 10,
            "comments_count": 2,
        },
        {
            "id": "m2",
            "caption": "Behind the scenes",
            "media_type": "REELS",
            "media_url": "https://cdn.example.com/m2.mp4",
            "thumbnail_url": "https://cdn.example.com/m2.jpg",
            "permalink": "https://instagram.com/p/m2",
            "timestamp": "2024-05-02T12:00:00+0000",
            "like_count": 40,
            "comments_count": 5,
        },
        {
            "id": "m3",
            "media_type": "CAROUSEL_ALBUM",
            "permalink": "https://instagram.com/p/m3",
            "timestamp": "2024-05-03T12:00:00+0000",
        },
    ]

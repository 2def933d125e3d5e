"""Tests for public origin and redirect URI resolution."""

import pytest
from fastapi import Request

from instasight.web.origin import resolve_redirect_uri, resolve_request_origin


def make_request(headers=None, scheme="http", server=("internal", 10000)):
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/facebook/login",
        "query_string": b"",
        "headers": raw_headers,
        "scheme": scheme,
        "server": server,
    })


class TestResolveRequestOrigin:
    """Tests for resolve_request_origin."""

    def test_forwarded_headers_win(self, mock_settings):
        """Test proxy headers take priority, first entry only."""
        request = make_request({
            "Host": "internal:10000",
            "X-Forwarded-Host": "app.example.com, proxy.internal",
            "X-Forwarded-Proto": "https,http",
        })

        assert resolve_request_origin(request, mock_settings) == "https://app.example.com"

    def test_host_header(self, mock_settings):
        """Test the Host header and request scheme are used without a proxy."""
        request = make_request({"Host": "localhost:8000"})

        assert resolve_request_origin(request, mock_settings) == "http://localhost:8000"

    def test_hosting_environment_fallback(self, mock_settings):
        """Test the hosting provider's public URL fills in missing headers."""
        settings = mock_settings.model_copy(update={
            "render_external_hostname": "instasight.onrender.com",
            "render_external_url": "https://instasight.onrender.com",
        })

        origin = resolve_request_origin(make_request(), settings)

        assert origin == "https://instasight.onrender.com"

    def test_external_url_only(self, mock_settings):
        """Test the external URL supplies both host and scheme."""
        settings = mock_settings.model_copy(update={"render_external_url": "https://svc.example.org"})

        assert resolve_request_origin(make_request(), settings) == "https://svc.example.org"

    def test_invalid_external_url_is_ignored(self, mock_settings):
        """Test a malformed external URL falls back to the request itself."""
        settings = mock_settings.model_copy(update={"render_external_url": "not a url"})

        assert resolve_request_origin(make_request(), settings) == "http://internal:10000"


class TestResolveRedirectUri:
    """Tests for resolve_redirect_uri."""

    def test_default_callback(self, mock_settings):
        """Test the default redirect URI is the callback path on the origin."""
        assert resolve_redirect_uri("https://app.example.com", mock_settings) == (
            "https://app.example.com/auth0"
        )

    @pytest.mark.parametrize(
        "configured, expected",
        [
            ("https://login.example.com/auth0", "https://login.example.com/auth0"),
            ("/custom/callback", "https://app.example.com/custom/callback"),
            ("http://localhost:3000/auth0", "https://app.example.com/auth0"),
        ],
    )
    def test_configured_redirect(self, mock_settings, configured, expected):
        """Test configured URIs, relative paths and the localhost guard."""
        settings = mock_settings.model_copy(update={"facebook_redirect_uri": configured})

        assert resolve_redirect_uri("https://app.example.com", settings) == expected

    def test_localhost_redirect_kept_for_local_origin(self, mock_settings):
        """Test a localhost redirect is honored when serving localhost."""
        settings = mock_settings.model_copy(
            update={"facebook_redirect_uri": "http://localhost:3000/auth0"}
        )

        assert resolve_redirect_uri("http://localhost:8000", settings) == (
            "http://localhost:3000/auth0"
        )

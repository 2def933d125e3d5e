"""Public origin and OAuth redirect URI resolution behind proxies."""

import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

from fastapi import Request

from instasight.config import Settings

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/auth0"


def _first_header_value(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    for part in value.split(","):
        part = part.strip()
        if part:
            return part
    return None


def _external_url_parts(settings: Settings) -> tuple[Optional[str], Optional[str]]:
    """Return (scheme, host) of the hosting provider's public URL, if valid."""
    if not settings.render_external_url:
        return None, None

    parts = urlsplit(settings.render_external_url)
    if not parts.scheme or not parts.netloc:
        logger.warning(
            f"Invalid RENDER_EXTERNAL_URL value; falling back to request origin: "
            f"{settings.render_external_url!r}"
        )
        return None, None
    return parts.scheme, parts.netloc


def resolve_request_origin(request: Request, settings: Settings) -> str:
    """Resolve the public ``scheme://host`` the client used to reach us."""
    headers = request.headers
    header_host = _first_header_value(headers.get("x-forwarded-host") or headers.get("host"))
    header_proto = _first_header_value(headers.get("x-forwarded-proto"))
    external_scheme, external_host = _external_url_parts(settings)

    host = (
        header_host
        or settings.render_external_hostname
        or external_host
        or request.url.netloc
    )
    protocol = (
        header_proto
        or external_scheme
        or request.url.scheme
        or ("http" if "localhost" in (host or "") else "https")
    )
    return f"{protocol}://{host}"


def resolve_redirect_uri(origin: str, settings: Settings) -> str:
    """Resolve the OAuth redirect URI for an origin.

    A configured URI pointing at localhost is ignored when serving a public
    origin.
    """
    default = urljoin(origin, CALLBACK_PATH)
    configured = settings.facebook_redirect_uri
    if not configured:
        return default

    redirect = urljoin(origin + "/", configured)
    redirect_host = urlsplit(redirect).netloc
    if not redirect_host:
        logger.warning(f"Invalid FACEBOOK_REDIRECT_URI value, falling back to default: {configured!r}")
        return default

    if "localhost" not in origin and "localhost" in redirect_host:
        return default
    return redirect

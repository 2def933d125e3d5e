"""JSON error responses shared by the proxy endpoints."""

import logging
from typing import Optional

import httpx
from fastapi.responses import JSONResponse

from instasight.services.graph.client import FacebookGraphError

logger = logging.getLogger(__name__)


def json_error(status_code: int, error: str, message: Optional[str] = None, **extra) -> JSONResponse:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


def not_authenticated(message: Optional[str] = None) -> JSONResponse:
    return json_error(401, "not_authenticated", message)


def graph_error_response(error: FacebookGraphError, error_key: str, tag: str) -> JSONResponse:
    """Map a Graph error to the endpoint's JSON error.

    Rejected tokens (code 190) become 401 so the front end can reconnect.
    """
    if error.is_invalid_token:
        return not_authenticated(error.message)

    logger.error(
        f"[{tag}] Graph error: {error.message} "
        f"(status={error.status_code}, facebook_error={error.facebook_error}, "
        f"body={error.response_body})"
    )
    return json_error(
        error.status_code or 502,
        error_key,
        error.message,
        facebookError=error.facebook_error,
        details=error.response_body,
    )


def transport_error_response(error: httpx.HTTPError, error_key: str, tag: str) -> JSONResponse:
    logger.error(f"[{tag}] Request failed: {error}")
    return json_error(500, error_key, details=str(error))

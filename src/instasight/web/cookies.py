"""Cookie storage for the OAuth state and session bundles."""

from typing import Optional

from fastapi import Request, Response

from instasight.config import Settings
from instasight.models.session import (
    FacebookPendingSession,
    FacebookSession,
    decode_pending_session,
    decode_session,
    encode_pending_session,
    encode_session,
)

SESSION_COOKIE = "fb_auth"
STATE_COOKIE = "fb_oauth_state"
PENDING_SESSION_COOKIE = "fb_pending_session"

SESSION_MAX_AGE = 60 * 60 * 24
STATE_MAX_AGE = 10 * 60
PENDING_SESSION_MAX_AGE = 10 * 60


def _set(response: Response, key: str, value: str, max_age: int, settings: Settings) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def _clear(response: Response, key: str, settings: Settings) -> None:
    response.delete_cookie(
        key,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def read_session(request: Request) -> Optional[FacebookSession]:
    """Read the connected session, ignoring invalid or expired bundles."""
    session = decode_session(request.cookies.get(SESSION_COOKIE))
    if session is None or session.is_expired():
        return None
    return session


def read_pending_session(request: Request) -> Optional[FacebookPendingSession]:
    return decode_pending_session(request.cookies.get(PENDING_SESSION_COOKIE))


def read_state(request: Request) -> Optional[str]:
    return request.cookies.get(STATE_COOKIE) or None


def set_session_cookie(response: Response, session: FacebookSession, settings: Settings) -> None:
    _set(response, SESSION_COOKIE, encode_session(session), SESSION_MAX_AGE, settings)


def set_pending_session_cookie(
    response: Response,
    session: FacebookPendingSession,
    settings: Settings,
) -> None:
    _set(
        response,
        PENDING_SESSION_COOKIE,
        encode_pending_session(session),
        PENDING_SESSION_MAX_AGE,
        settings,
    )


def set_state_cookie(response: Response, state: str, settings: Settings) -> None:
    _set(response, STATE_COOKIE, state, STATE_MAX_AGE, settings)


def clear_session_cookie(response: Response, settings: Settings) -> None:
    _clear(response, SESSION_COOKIE, settings)


def clear_pending_session_cookie(response: Response, settings: Settings) -> None:
    _clear(response, PENDING_SESSION_COOKIE, settings)


def clear_state_cookie(response: Response, settings: Settings) -> None:
    _clear(response, STATE_COOKIE, settings)

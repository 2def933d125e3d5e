"""OAuth login, callback, page selection and logout routes."""

import json
import logging
import secrets
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from instasight.config import Settings, get_settings
from instasight.models.session import FacebookPendingSession, FacebookSession
from instasight.services.graph.auth import FacebookAuth
from instasight.services.graph.client import FacebookGraphError
from instasight.web import cookies, pages
from instasight.web.origin import resolve_redirect_uri, resolve_request_origin
from instasight.web.responses import json_error

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


def _error_redirect(origin: str, error_key: str) -> RedirectResponse:
    return _redirect(f"{origin}/?error={error_key}")


def _state_matches(state: Optional[str], stored_state: Optional[str]) -> bool:
    if not state or not stored_state:
        return False
    # compare_digest only accepts ASCII str, so compare the encoded bytes
    return secrets.compare_digest(state.encode("utf-8"), stored_state.encode("utf-8"))


@router.get("/", response_class=HTMLResponse)
def home(request: Request, error: Optional[str] = None, connected: Optional[str] = None):
    """Show connection status and any login error."""
    session = cookies.read_session(request)
    return HTMLResponse(pages.render_home(session, error_key=error, connected=connected == "1"))


@router.get("/api/facebook/login")
def login(request: Request, settings: Settings = Depends(get_settings)):
    """Redirect to the Facebook OAuth dialog."""
    if not settings.facebook_app_id:
        return JSONResponse({"error": "FACEBOOK_APP_ID is not configured"}, status_code=500)

    auth = FacebookAuth(settings)
    state = auth.generate_state()
    origin = resolve_request_origin(request, settings)
    redirect_uri = resolve_redirect_uri(origin, settings)

    response = _redirect(auth.get_authorization_url(redirect_uri, state))
    cookies.set_state_cookie(response, state, settings)
    return response


@router.get("/auth0")
def auth0(request: Request):
    """Forward the OAuth redirect, query included, to the callback handler."""
    url = request.url.replace(path="/api/facebook/callback")
    return _redirect(str(url))


@router.get("/api/facebook/callback")
def callback(request: Request, settings: Settings = Depends(get_settings)):
    """Complete the OAuth flow and store the session (or pending page choice)."""
    if not settings.is_facebook_configured:
        return JSONResponse(
            {"error": "Facebook app credentials are not configured"},
            status_code=500,
        )

    origin = resolve_request_origin(request, settings)
    redirect_uri = resolve_redirect_uri(origin, settings)

    params = request.query_params
    if params.get("error"):
        logger.warning(
            f"OAuth dialog returned error: {params.get('error')} "
            f"({params.get('error_description')})"
        )
        return _error_redirect(origin, "oauth_denied")

    code = params.get("code")
    state = params.get("state")
    stored_state = cookies.read_state(request)

    if not code or not _state_matches(state, stored_state):
        return _error_redirect(origin, "oauth_state_mismatch")

    auth = FacebookAuth(settings)

    try:
        grant = auth.exchange_code_for_token(code, redirect_uri)
    except (FacebookGraphError, httpx.HTTPError) as e:
        logger.error(f"Token exchange failed: {e}")
        return _error_redirect(origin, "token_exchange_failed")

    try:
        candidates = auth.get_instagram_pages(grant.access_token)
    except (FacebookGraphError, httpx.HTTPError) as e:
        logger.error(f"Listing Facebook pages failed: {e}")
        return _error_redirect(origin, "accounts_fetch_failed")

    if not candidates:
        return _error_redirect(origin, "no_instagram_account")

    if len(candidates) == 1:
        session = FacebookSession.for_page(grant.access_token, candidates[0], grant.expires_at)
        logger.info(f"Connected page {session.page_id} ({session.page_name})")

        response = _redirect(f"{origin}/?connected=1")
        cookies.clear_state_cookie(response, settings)
        cookies.clear_pending_session_cookie(response, settings)
        cookies.set_session_cookie(response, session, settings)
        return response

    pending = FacebookPendingSession(
        user_access_token=grant.access_token,
        pages=candidates,
        expires_at=grant.expires_at,
    )
    logger.info(f"User manages {len(candidates)} Instagram-linked pages; awaiting selection")

    response = _redirect(f"{origin}/select-page")
    cookies.clear_state_cookie(response, settings)
    cookies.clear_session_cookie(response, settings)
    cookies.set_pending_session_cookie(response, pending, settings)
    return response


@router.get("/select-page", response_class=HTMLResponse)
def select_page_form(request: Request):
    """Render the page picker for users with several Instagram-linked pages."""
    pending = cookies.read_pending_session(request)

    if pending is None or not pending.pages:
        return _redirect("/?error=pending_session_expired")
    if len(pending.pages) == 1:
        return _redirect("/")

    return HTMLResponse(pages.render_select_page(pending))


@router.get("/api/facebook/pages")
def list_pending_pages(request: Request):
    """List the pages awaiting selection, without their tokens."""
    pending = cookies.read_pending_session(request)
    if pending is None or not pending.pages:
        return json_error(404, "pending_session_expired")

    return {
        "pages": [
            {
                "pageId": page.page_id,
                "pageName": page.page_name,
                "instagramBusinessId": page.instagram_business_id,
            }
            for page in pending.pages
        ]
    }


async def _extract_page_id(request: Request) -> Optional[str]:
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        page_id = body.get("pageId") if isinstance(body, dict) else None
        return page_id if isinstance(page_id, str) else None

    if (
        "application/x-www-form-urlencoded" in content_type
        or "multipart/form-data" in content_type
    ):
        form = await request.form()
        page_id = form.get("pageId")
        return page_id if isinstance(page_id, str) else None

    return None


@router.post("/api/facebook/select-page")
async def select_page(request: Request, settings: Settings = Depends(get_settings)):
    """Finish a pending login with the chosen page."""
    origin = resolve_request_origin(request, settings)
    pending = cookies.read_pending_session(request)

    if pending is None:
        return _error_redirect(origin, "pending_session_expired")

    page_id = await _extract_page_id(request)
    page = pending.find_page(page_id) if page_id else None
    if page is None:
        return _error_redirect(origin, "page_selection_invalid")

    session = FacebookSession.for_page(pending.user_access_token, page, pending.expires_at)
    logger.info(f"Connected page {session.page_id} ({session.page_name})")

    response = _redirect(f"{origin}/?connected=1")
    cookies.clear_pending_session_cookie(response, settings)
    cookies.set_session_cookie(response, session, settings)
    return response


@router.post("/api/facebook/logout")
def logout(settings: Settings = Depends(get_settings)):
    """Forget the connected and pending sessions."""
    response = JSONResponse({"success": True})
    cookies.clear_session_cookie(response, settings)
    cookies.clear_pending_session_cookie(response, settings)
    return response

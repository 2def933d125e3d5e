"""Minimal HTML pages for the connect and page-selection flow."""

from html import escape
from typing import Optional

from instasight.models.session import FacebookPendingSession, FacebookSession

ERROR_MESSAGES = {
    "oauth_state_mismatch": "We could not validate the login response. Please try again.",
    "oauth_denied": "Facebook login was cancelled or denied.",
    "token_exchange_failed": (
        "Facebook did not accept the authentication request. "
        "Double-check the app credentials."
    ),
    "accounts_fetch_failed": (
        "We could not list your Facebook pages. "
        "Make sure the user granted pages access."
    ),
    "no_instagram_account": "No Instagram business account is linked to the selected page.",
    "media_fetch_failed": (
        "We could not fetch Instagram media for this account. Verify its permissions."
    ),
    "pending_session_expired": "The page selection expired. Please connect again.",
    "page_selection_invalid": "Please choose one of the listed pages.",
}

UNEXPECTED_ERROR_MESSAGE = "Unexpected error. Please try again."


def error_message_for(error_key: Optional[str]) -> Optional[str]:
    """Map an ``?error=`` key to a friendly message."""
    if not error_key:
        return None
    return ERROR_MESSAGES.get(error_key, UNEXPECTED_ERROR_MESSAGE)


def _layout(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{escape(title)}</title></head>
<body style="font-family: sans-serif; max-width: 48rem; margin: 0 auto; padding: 3rem 1.5rem;">
<p style="color: #1877f2;">Instasight &middot; Instagram Insights</p>
{body}
</body>
</html>
"""


def render_home(
    session: Optional[FacebookSession],
    error_key: Optional[str] = None,
    connected: bool = False,
) -> str:
    parts = ["<h1>Connect a Facebook page and explore its Instagram media.</h1>"]

    message = error_message_for(error_key)
    if message:
        parts.append(f'<p role="alert" style="color: #b91c1c;">{escape(message)}</p>')

    if session:
        if connected:
            parts.append("<p>Connection complete.</p>")
        parts.append(
            f"<p>Connected as <strong>{escape(session.page_name)}</strong> "
            f"(Instagram Business ID: {escape(session.instagram_business_id)})</p>"
            '<form action="/api/facebook/logout" method="post">'
            '<button type="submit">Disconnect</button></form>'
        )
    else:
        parts.append(
            '<p><a href="/api/facebook/login">Connect with Facebook</a></p>'
            "<p>Connect a Facebook account to unlock the publisher, insights, "
            "and feed preview.</p>"
        )

    return _layout("Instasight", "\n".join(parts))


def render_select_page(pending: FacebookPendingSession) -> str:
    forms = []
    for page in pending.pages:
        forms.append(
            '<form action="/api/facebook/select-page" method="post" '
            'style="border: 1px solid #e4e4e7; padding: 1rem; margin-bottom: 1rem;">'
            f'<input type="hidden" name="pageId" value="{escape(page.page_id)}">'
            f"<h2>{escape(page.page_name)}</h2>"
            f"<p>Instagram Business ID: {escape(page.instagram_business_id)}</p>"
            '<button type="submit">Use this page</button>'
            "</form>"
        )

    body = (
        "<h1>Choose a Facebook Page</h1>"
        "<p>This Facebook user manages multiple pages with Instagram business accounts. "
        "Select the page you would like to use for insights and publishing.</p>"
        + "\n".join(forms)
        + '<p>Need to switch Facebook users? <a href="/">Go back home</a> '
        "and disconnect to start again.</p>"
    )
    return _layout("Choose a Facebook Page", body)

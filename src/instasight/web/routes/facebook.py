"""Proxy endpoints over the Instagram Graph API."""

import json
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from instasight.config import Settings, get_settings
from instasight.models.session import FacebookSession
from instasight.services.graph import metrics
from instasight.services.graph.client import FacebookGraphError, GraphClient
from instasight.services.graph.publisher import InstagramPublisher, PublishError
from instasight.web import cookies
from instasight.web.responses import (
    graph_error_response,
    json_error,
    not_authenticated,
    transport_error_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/facebook")

FEED_LIMIT = 12
LEADERBOARD_MEDIA_LIMIT = 25


def graph_client_for(session: FacebookSession, settings: Settings) -> GraphClient:
    return GraphClient(
        access_token=session.page_access_token,
        instagram_business_id=session.instagram_business_id,
        settings=settings,
    )


def _account_fields(session: FacebookSession) -> dict:
    return {
        "pageName": session.page_name,
        "instagramBusinessId": session.instagram_business_id,
    }


@router.get("/posts")
def get_posts(request: Request, settings: Settings = Depends(get_settings)):
    """Return the latest media for the connected account."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    try:
        with graph_client_for(session, settings) as client:
            media = client.fetch_media(limit=FEED_LIMIT)
    except FacebookGraphError as e:
        return graph_error_response(e, "media_fetch_failed", "facebook/posts")
    except httpx.HTTPError as e:
        return transport_error_response(e, "media_fetch_failed", "facebook/posts")

    return {
        **_account_fields(session),
        "data": [item.model_dump(exclude_none=True) for item in media],
    }


@router.get("/insights")
def get_engagement_leaderboard(request: Request, settings: Settings = Depends(get_settings)):
    """Rank recent media by likes plus comments."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    try:
        with graph_client_for(session, settings) as client:
            media = client.fetch_media(limit=LEADERBOARD_MEDIA_LIMIT)
    except FacebookGraphError as e:
        return graph_error_response(e, "insights_failed", "facebook/insights")
    except httpx.HTTPError as e:
        return transport_error_response(e, "insights_failed", "facebook/insights")

    if not media:
        return {
            **_account_fields(session),
            "totalPosts": 0,
            "topPost": None,
            "leaderboard": [],
        }

    ranked = metrics.rank_media_by_engagement(media)
    return {
        **_account_fields(session),
        "totalPosts": len(ranked),
        "topPost": ranked[0].model_dump(exclude_none=True),
        "leaderboard": [entry.model_dump() for entry in metrics.build_leaderboard(ranked)],
    }


@router.get("/account/insights")
def get_account_insights(
    request: Request,
    days: Optional[str] = None,
    settings: Settings = Depends(get_settings),
):
    """Return account-level insights with 7 and 28 day rollups."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    try:
        with graph_client_for(session, settings) as client:
            insights = client.fetch_account_insights(period_days=days)
    except FacebookGraphError as e:
        return graph_error_response(e, "account_insights_failed", "facebook/account/insights")
    except httpx.HTTPError as e:
        return transport_error_response(e, "account_insights_failed", "facebook/account/insights")

    return {
        **_account_fields(session),
        "insights": insights.to_json_dict(),
    }


@router.get("/media/{media_id}/insights")
def get_media_insights(
    media_id: str,
    request: Request,
    type: Optional[str] = None,
    settings: Settings = Depends(get_settings),
):
    """Return insights for one media object, chosen by its media type."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    if not media_id.strip():
        return json_error(400, "missing_media_id", "Media ID is required")

    try:
        with graph_client_for(session, settings) as client:
            insights = client.fetch_media_insights(media_id, type)
    except FacebookGraphError as e:
        return graph_error_response(e, "media_insights_failed", "facebook/media/insights")
    except httpx.HTTPError as e:
        return transport_error_response(e, "media_insights_failed", "facebook/media/insights")

    return {"mediaId": media_id, "mediaType": type, "insights": insights}


def _publish_image(
    session: FacebookSession,
    settings: Settings,
    image_url: str,
    caption: Optional[str],
):
    with graph_client_for(session, settings) as client:
        return InstagramPublisher(client).publish_image(image_url, caption)


@router.post("/publish")
async def publish(request: Request, settings: Settings = Depends(get_settings)):
    """Publish a new image post to the connected account."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return json_error(400, "invalid_body", "Expected JSON payload")

    if not isinstance(body, dict):
        body = {}
    image_url = body.get("imageUrl")
    caption = body.get("caption")

    if not isinstance(image_url, str) or not image_url:
        return json_error(400, "missing_image_url", "Image URL is required")
    if not isinstance(caption, str):
        caption = None

    try:
        result = await run_in_threadpool(_publish_image, session, settings, image_url, caption)
    except FacebookGraphError as e:
        return graph_error_response(e, "publish_failed", "facebook/publish")
    except PublishError as e:
        logger.error(f"[facebook/publish] {e}")
        return json_error(502, "publish_failed", str(e))
    except httpx.HTTPError as e:
        return transport_error_response(e, "publish_failed", "facebook/publish")

    return {"success": True, "creationId": result.creation_id, "mediaId": result.media_id}

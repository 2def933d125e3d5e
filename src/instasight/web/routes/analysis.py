"""AI analysis endpoint."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request

from instasight.config import Settings, get_settings
from instasight.services.ai.analyzer import InsightsAnalyzer
from instasight.services.ai.openai_client import AnalysisError
from instasight.services.graph.client import FacebookGraphError
from instasight.web import cookies
from instasight.web.routes.facebook import graph_client_for
from instasight.web.responses import json_error, not_authenticated

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights")


@router.post("/analysis")
def run_analysis(request: Request, settings: Settings = Depends(get_settings)):
    """Summarize recent posts and their insights with the language model."""
    session = cookies.read_session(request)
    if session is None:
        return not_authenticated()

    try:
        with graph_client_for(session, settings) as client:
            analyzer = InsightsAnalyzer(client)
            posts = analyzer.collect_post_summaries()

            if not posts:
                return json_error(400, "no_posts", "No Instagram posts available yet.")

            result = analyzer.analyze(posts)
    except (FacebookGraphError, AnalysisError, httpx.HTTPError, ValueError) as e:
        logger.error(f"[insights/analysis] failed: {e}")
        return json_error(500, "analysis_failed", str(e) or "Unknown error during analysis")

    return {
        "success": True,
        "model": result.model,
        "summary": result.summary,
        "analyzedPosts": result.analyzed_posts,
    }

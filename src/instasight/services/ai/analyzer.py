"""AI analysis of recent Instagram posts."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import httpx

from instasight.models.insights import InstagramMedia, PostSummary
from instasight.services.ai.openai_client import OpenAIClient
from instasight.services.ai.prompts import ANALYST_SYSTEM_PROMPT, build_analysis_prompt
from instasight.services.graph.client import FacebookGraphError, GraphClient

logger = logging.getLogger(__name__)

ANALYSIS_MEDIA_LIMIT = 50
MAX_INSIGHT_WORKERS = 8


@dataclass
class AnalysisResult:
    """Narrative summary produced by the model."""

    model: str
    summary: str
    analyzed_posts: int


class InsightsAnalyzer:
    """Collect post data from the Graph API and summarize it with an LLM."""

    def __init__(self, graph: GraphClient, ai: Optional[OpenAIClient] = None):
        self.graph = graph
        self._ai = ai

    @property
    def ai(self) -> OpenAIClient:
        # Built lazily so a missing key only fails once there is data to analyze
        if self._ai is None:
            self._ai = OpenAIClient(settings=self.graph.settings)
        return self._ai

    def _summarize(self, media: InstagramMedia) -> PostSummary:
        try:
            insights = self.graph.fetch_media_insights(media.id, media.media_type)
        except FacebookGraphError as e:
            logger.error(
                f"Media insights error for {media.id}: {e.message} "
                f"(facebook error: {e.facebook_error})"
            )
            insights = {}
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Media insights error for {media.id}: {e}")
            insights = {}
        return PostSummary.from_media(media, insights)

    def collect_post_summaries(self, limit: int = ANALYSIS_MEDIA_LIMIT) -> list[PostSummary]:
        """Fetch recent media and enrich every item with its insights.

        A failed insights call degrades that post to empty insights.
        """
        media = self.graph.fetch_media(limit=limit)
        if not media:
            return []

        workers = min(MAX_INSIGHT_WORKERS, len(media))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._summarize, media))

    def analyze(self, posts: list[PostSummary]) -> AnalysisResult:
        """Ask the model for a narrative breakdown of the posts."""
        prompt = build_analysis_prompt(posts)
        summary = self.ai.generate(prompt, system_prompt=ANALYST_SYSTEM_PROMPT)
        return AnalysisResult(model=self.ai.model, summary=summary, analyzed_posts=len(posts))

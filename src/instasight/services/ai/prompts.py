"""Prompts for AI post analysis."""

import json

from instasight.models.insights import PostSummary

ANALYST_SYSTEM_PROMPT = (
    "You are a senior social media analyst. Be concise, tactical, and rely strictly "
    "on the provided data. Use markdown bullet lists where helpful."
)

ANALYSIS_INSTRUCTIONS = """You are an Instagram marketing strategist. Review the supplied posts and determine which one drove the most impact.
Impact should consider total engagement (likes, comments, saves, shares, plays, reach, impressions) when available.
Respond with three sections:
1. `Top Post` - identify the winning post by its ID, media type, AND include the mediaUrl or thumbnailUrl so the user can see which post it is.
2. `Why it worked` - list 2-3 concise bullet points grounded in the metrics and caption.
3. `Recommendations` - provide 3 actionable suggestions to replicate or improve future performance.
"""


def build_dataset(posts: list[PostSummary]) -> list[dict]:
    """Shape post summaries into the dataset embedded in the prompt."""
    return [
        {
            "id": post.id,
            "mediaType": post.media_type,
            "mediaUrl": post.media_url,
            "thumbnailUrl": post.thumbnail_url,
            "caption": post.caption,
            "permalink": post.permalink,
            "timestamp": post.timestamp,
            "likes": post.like_count,
            "comments": post.comments_count,
            "insights": post.insights,
        }
        for post in posts
    ]


def build_analysis_prompt(posts: list[PostSummary]) -> str:
    """Build the analysis prompt for a list of posts."""
    dataset = json.dumps(build_dataset(posts), indent=2)
    return f"{ANALYSIS_INSTRUCTIONS}\nDataset (JSON):\n{dataset}"

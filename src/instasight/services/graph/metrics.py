"""Metric selection and normalization for Instagram insights."""

import math
import time
from datetime import datetime, timezone
from typing import Any, Optional, Union

from instasight.models.insights import (
    DailyTotals,
    InstagramMedia,
    LeaderboardEntry,
    MediaInsights,
    RankedMedia,
    TimeseriesPoint,
)

DAY_SECONDS = 24 * 60 * 60
DEFAULT_PERIOD_DAYS = 28
# The insights endpoint rejects ranges of 30 days or more
MAX_RANGE_SECONDS = 30 * DAY_SECONDS - 60

# Feed videos do not expose profile metrics
VIDEO_METRICS = [
    "reach",
    "saved",
    "views",
    "likes",
    "comments",
    "shares",
    "total_interactions",
]

REELS_METRICS = [
    "reach",
    "saved",
    "views",
    "likes",
    "comments",
    "shares",
    "total_interactions",
    "follows",
    "ig_reels_avg_watch_time",
    "ig_reels_video_view_total_time",
]

# Stories are only available for 24 hours
STORY_METRICS = [
    "reach",
    "views",
    "follows",
    "profile_visits",
    "shares",
    "total_interactions",
]

IMAGE_METRICS = [
    "reach",
    "saved",
    "likes",
    "comments",
    "shares",
    "total_interactions",
    "profile_visits",
    "profile_activity",
]

METRICS_BY_MEDIA_TYPE = {
    "VIDEO": VIDEO_METRICS,
    "REELS": REELS_METRICS,
    "STORY": STORY_METRICS,
    "CAROUSEL_ALBUM": IMAGE_METRICS,
    "IMAGE": IMAGE_METRICS,
}

ACCOUNT_DAILY_METRICS = [
    "reach",
    "profile_views",
    "website_clicks",
    "accounts_engaged",
    "total_interactions",
    "likes",
    "comments",
    "shares",
    "saves",
    "profile_links_taps",
    "views",
]

ACCOUNT_METRIC_LABELS = {
    "reach": "Reach",
    "profile_views": "Profile Views",
    "website_clicks": "Website Clicks",
    "accounts_engaged": "Accounts Engaged",
    "total_interactions": "Total Interactions",
    "likes": "Likes",
    "comments": "Comments",
    "shares": "Shares",
    "saves": "Saves",
    "profile_links_taps": "Profile Link Taps",
    "views": "Views",
}

ACCOUNT_METRIC_ORDER = [
    "reach",
    "views",
    "accounts_engaged",
    "total_interactions",
    "likes",
    "comments",
    "shares",
    "saves",
    "profile_views",
    "profile_links_taps",
    "website_clicks",
]

MEDIA_METRIC_LABELS = {
    "reach": "Reach",
    "saved": "Saves",
    "views": "Views",
    "likes": "Likes",
    "comments": "Comments",
    "shares": "Shares",
    "total_interactions": "Total Interactions",
    "follows": "New Follows",
    "profile_visits": "Profile Visits",
    "profile_activity": "Profile Actions",
    "ig_reels_avg_watch_time": "Avg Watch Time",
    "ig_reels_video_view_total_time": "Total Watch Time",
}

MEDIA_METRIC_ORDER = [
    "reach",
    "views",
    "total_interactions",
    "likes",
    "comments",
    "shares",
    "saved",
    "follows",
    "profile_visits",
    "profile_activity",
    "ig_reels_avg_watch_time",
    "ig_reels_video_view_total_time",
]

LEADERBOARD_SIZE = 5


def metrics_for_media_type(media_type: Optional[str]) -> list[str]:
    """Return the insight metrics supported by a media type.

    Unknown or missing types are treated as regular image posts.
    """
    return list(METRICS_BY_MEDIA_TYPE.get(media_type or "", IMAGE_METRICS))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_media_insights(payload: dict[str, Any]) -> MediaInsights:
    """Flatten a media insights response into ``{metric: value}``.

    Only the first value of each metric is used, and non-numeric values are
    dropped.
    """
    insights: MediaInsights = {}
    if not isinstance(payload, dict):
        return insights
    for item in payload.get("data") or []:
        if not isinstance(item, dict):
            continue
        values = item.get("values") or []
        first = values[0] if isinstance(values, list) and values else None
        value = first.get("value") if isinstance(first, dict) else None
        if item.get("name") and _is_number(value):
            insights[item["name"]] = value
    return insights


def parse_period_days(value: Union[str, int, float, None]) -> int:
    """Parse a requested period, falling back to the default on bad input."""
    if value is None:
        return DEFAULT_PERIOD_DAYS
    if isinstance(value, str):
        try:
            value = int(value.strip(), 10)
        except ValueError:
            return DEFAULT_PERIOD_DAYS
    if isinstance(value, float) and not math.isfinite(value):
        return DEFAULT_PERIOD_DAYS
    return int(value)


def insight_window(
    period_days: Union[str, int, float, None] = None,
    now: Optional[float] = None,
) -> tuple[int, int]:
    """Compute the ``(since, until)`` unix range for account insights."""
    days = parse_period_days(period_days)
    until = int(time.time() if now is None else now)
    clamped_range = min(max(days, 1) * DAY_SECONDS, MAX_RANGE_SECONDS)
    since = max(until - clamped_range, 0)
    return since, until


def _parse_end_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        # Graph timestamps look like 2024-05-01T07:00:00+0000
        return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
    except ValueError:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None


def aggregate_daily_metric(metric: dict[str, Any], until: float) -> DailyTotals:
    """Roll a daily metric up into 7 and 28 day totals.

    Metrics returned as a ``values`` timeseries are summed over the points that
    end within each window. Metrics returned as a single ``total_value`` use
    that total for both windows.
    """
    points: list[TimeseriesPoint] = []
    last_7 = 0
    last_28 = 0

    for entry in metric.get("values") or []:
        value = entry.get("value")
        end_time = _parse_end_time(entry.get("end_time"))
        if not _is_number(value) or end_time is None:
            continue

        points.append(TimeseriesPoint(date=end_time.isoformat(), value=value))
        age = until - end_time.timestamp()
        if age <= 7 * DAY_SECONDS:
            last_7 += value
        if age <= 28 * DAY_SECONDS:
            last_28 += value

    if points:
        return DailyTotals(last_7_days=last_7, last_28_days=last_28, timeseries=points)

    total = (metric.get("total_value") or {}).get("value")
    if not _is_number(total):
        total = 0

    stamp = datetime.fromtimestamp(until, tz=timezone.utc).isoformat()
    return DailyTotals(
        last_7_days=total,
        last_28_days=total,
        timeseries=[TimeseriesPoint(date=stamp, value=total)],
    )


def aggregate_account_insights(
    payload: dict[str, Any],
    until: float,
) -> dict[str, DailyTotals]:
    """Aggregate every metric in an account insights response."""
    return {
        metric["name"]: aggregate_daily_metric(metric, until)
        for metric in payload.get("data") or []
        if metric.get("name")
    }


def rank_media_by_engagement(media: list[InstagramMedia]) -> list[RankedMedia]:
    """Score media by likes plus comments, highest first."""
    ranked = [
        RankedMedia(
            **item.model_dump(),
            engagement=(item.like_count or 0) + (item.comments_count or 0),
        )
        for item in media
    ]
    ranked.sort(key=lambda item: item.engagement, reverse=True)
    return ranked


def build_leaderboard(
    ranked: list[RankedMedia],
    size: int = LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """Build the top-N leaderboard rows from ranked media."""
    return [
        LeaderboardEntry(
            position=index + 1,
            id=item.id,
            caption=item.caption,
            engagement=item.engagement,
            like_count=item.like_count or 0,
            comments_count=item.comments_count or 0,
            timestamp=item.timestamp,
            permalink=item.permalink,
            media_url=item.preview_url,
        )
        for index, item in enumerate(ranked[:size])
    ]

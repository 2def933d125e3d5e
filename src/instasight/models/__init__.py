"""Pydantic models for Instasight."""

from instasight.models.insights import (
    AccountInsights,
    DailyTotals,
    InstagramMedia,
    LeaderboardEntry,
    MediaInsights,
    PostSummary,
    RankedMedia,
    TimeseriesPoint,
)
from instasight.models.session import (
    FacebookPageOption,
    FacebookPendingSession,
    FacebookSession,
    decode_pending_session,
    decode_session,
    encode_pending_session,
    encode_session,
)

__all__ = [
    "AccountInsights",
    "DailyTotals",
    "FacebookPageOption",
    "FacebookPendingSession",
    "FacebookSession",
    "InstagramMedia",
    "LeaderboardEntry",
    "MediaInsights",
    "PostSummary",
    "RankedMedia",
    "TimeseriesPoint",
    "decode_pending_session",
    "decode_session",
    "encode_pending_session",
    "encode_session",
]

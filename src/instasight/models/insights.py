"""Instagram media and insight models."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from instasight.models.base import CamelModel

Number = Union[int, float]

# Metric name -> numeric value for a single media object
MediaInsights = dict[str, Number]


class InstagramMedia(BaseModel):
    """An Instagram media object as returned by the Graph API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    caption: Optional[str] = None
    media_type: str = ""
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    permalink: Optional[str] = None
    timestamp: Optional[str] = None
    like_count: Optional[int] = None
    comments_count: Optional[int] = None

    @property
    def preview_url(self) -> Optional[str]:
        return self.media_url or self.thumbnail_url


class RankedMedia(InstagramMedia):
    """Media annotated with its engagement score."""

    engagement: int = 0


class LeaderboardEntry(BaseModel):
    """A row of the engagement leaderboard."""

    position: int
    id: str
    caption: Optional[str] = None
    engagement: int
    like_count: int
    comments_count: int
    timestamp: Optional[str] = None
    permalink: Optional[str] = None
    media_url: Optional[str] = None


class TimeseriesPoint(CamelModel):
    date: str
    value: Number


class DailyTotals(CamelModel):
    """Rolling totals for one account metric."""

    last_7_days: Number = Field(default=0, alias="last7Days")
    last_28_days: Number = Field(default=0, alias="last28Days")
    timeseries: list[TimeseriesPoint] = Field(default_factory=list)


class AccountInsights(CamelModel):
    """Account-level insights for the connected Instagram business account."""

    follower_count: Optional[int] = None
    daily_totals: dict[str, DailyTotals] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        # followerCount is reported as null rather than dropped
        return self.model_dump(mode="json", by_alias=True)


class PostSummary(BaseModel):
    """A media item with its insights, as fed to the analysis prompt."""

    id: str
    caption: Optional[str] = None
    media_type: str = ""
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    permalink: Optional[str] = None
    timestamp: Optional[str] = None
    like_count: int = 0
    comments_count: int = 0
    insights: MediaInsights = Field(default_factory=dict)

    @classmethod
    def from_media(
        cls,
        media: InstagramMedia,
        insights: Optional[MediaInsights] = None,
    ) -> "PostSummary":
        return cls(
            id=media.id,
            caption=media.caption,
            media_type=media.media_type,
            media_url=media.media_url,
            thumbnail_url=media.thumbnail_url,
            permalink=media.permalink,
            timestamp=media.timestamp,
            like_count=media.like_count or 0,
            comments_count=media.comments_count or 0,
            insights=insights or {},
        )

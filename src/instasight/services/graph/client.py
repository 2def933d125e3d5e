"""Facebook Graph API client for Instagram business accounts."""

import logging
from typing import Any, Optional

import httpx
from ratelimit import limits, sleep_and_retry
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from instasight.config import Settings, get_settings
from instasight.models.insights import AccountInsights, InstagramMedia, MediaInsights
from instasight.services.graph import metrics

logger = logging.getLogger(__name__)

INVALID_TOKEN_CODE = 190

MEDIA_FIELDS = [
    "id",
    "caption",
    "media_type",
    "media_url",
    "permalink",
    "timestamp",
    "thumbnail_url",
    "like_count",
    "comments_count",
]


class FacebookGraphError(Exception):
    """Error response from the Graph API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else 500
        self.response_body = response_body
        self.payload = payload

    @property
    def facebook_error(self) -> Optional[dict[str, Any]]:
        """The ``error`` object of the Graph payload, if any."""
        if isinstance(self.payload, dict) and isinstance(self.payload.get("error"), dict):
            return self.payload["error"]
        return None

    @property
    def code(self) -> Optional[int]:
        error = self.facebook_error
        return error.get("code") if error else None

    @property
    def is_invalid_token(self) -> bool:
        """Check if the access token was rejected (expired or revoked)."""
        return self.code == INVALID_TOKEN_CODE


class GraphRateLimitError(FacebookGraphError):
    """Rate limit exceeded error."""

    pass


def raise_for_graph_error(response: httpx.Response, fallback_message: str) -> None:
    """Raise FacebookGraphError for a non-2xx Graph response.

    The Graph ``error.message`` is used when present, otherwise the fallback.
    """
    if response.is_success:
        return

    text = response.text
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        payload = None

    message = fallback_message
    error = (payload or {}).get("error")
    if isinstance(error, dict):
        graph_message = error.get("message")
        if isinstance(graph_message, str) and graph_message.strip():
            message = graph_message

    error_cls = GraphRateLimitError if response.status_code == 429 else FacebookGraphError
    raise error_cls(
        message,
        status_code=response.status_code,
        response_body=text,
        payload=payload,
    )


class GraphClient:
    """Client for the Instagram endpoints of the Graph API."""

    # Process-wide throttle across all connected users
    CALLS_PER_PERIOD = 600
    PERIOD = 60

    def __init__(
        self,
        access_token: str,
        instagram_business_id: str,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.access_token = access_token
        self.instagram_business_id = instagram_business_id
        self.settings = settings or get_settings()
        self.base_url = self.settings.graph_base_url
        self._client = http_client or httpx.Client(timeout=30.0)

    def __enter__(self) -> "GraphClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    @sleep_and_retry
    @limits(calls=CALLS_PER_PERIOD, period=PERIOD)
    @retry(
        retry=retry_if_exception_type((httpx.TransportError, GraphRateLimitError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _make_request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make a throttled Graph API request authenticated with the page token."""
        url = f"{self.base_url}/{path.lstrip('/')}"

        if method == "GET":
            params = dict(params or {})
            params["access_token"] = self.access_token
        else:
            data = dict(data or {})
            data["access_token"] = self.access_token

        response = self._client.request(method, url, params=params, data=data)
        raise_for_graph_error(response, fallback_message)
        return response.json()

    def fetch_media(self, limit: int = 12) -> list[InstagramMedia]:
        """Get recent media from the Instagram business account."""
        response = self._make_request(
            "GET",
            f"{self.instagram_business_id}/media",
            "Failed to fetch Instagram media",
            params={"fields": ",".join(MEDIA_FIELDS), "limit": str(limit)},
        )
        return [InstagramMedia.model_validate(item) for item in response.get("data", [])]

    def create_media_container(self, image_url: str, caption: Optional[str] = None) -> str:
        """Create an image media container and return its creation ID."""
        data = {"image_url": image_url}
        if caption:
            data["caption"] = caption

        response = self._make_request(
            "POST",
            f"{self.instagram_business_id}/media",
            "Failed to create Instagram media container",
            data=data,
        )
        return response["id"]

    def check_container_status(self, creation_id: str) -> dict[str, Any]:
        """Check the processing status of a media container."""
        return self._make_request(
            "GET",
            creation_id,
            "Failed to check media container status",
            params={"fields": "status_code,status"},
        )

    def publish_media(self, creation_id: str) -> str:
        """Publish a media container and return the new media ID."""
        response = self._make_request(
            "POST",
            f"{self.instagram_business_id}/media_publish",
            "Failed to publish Instagram media",
            data={"creation_id": creation_id},
        )
        return response["id"]

    def fetch_media_insights(
        self,
        media_id: str,
        media_type: Optional[str] = None,
    ) -> MediaInsights:
        """Get insights for a media object using the metrics its type supports."""
        response = self._make_request(
            "GET",
            f"{media_id}/insights",
            "Failed to fetch media insights",
            params={"metric": ",".join(metrics.metrics_for_media_type(media_type))},
        )
        return metrics.parse_media_insights(response)

    def fetch_follower_count(self) -> Optional[int]:
        """Get the account's current follower count."""
        response = self._make_request(
            "GET",
            self.instagram_business_id,
            "Failed to fetch follower count",
            params={"fields": "followers_count"},
        )
        return response.get("followers_count")

    def fetch_account_insights(
        self,
        period_days: Optional[Any] = None,
        now: Optional[float] = None,
    ) -> AccountInsights:
        """Get account-level insights rolled up into 7 and 28 day totals."""
        since, until = metrics.insight_window(period_days, now=now)

        daily = self._make_request(
            "GET",
            f"{self.instagram_business_id}/insights",
            "Failed to fetch account insights",
            params={
                "metric": ",".join(metrics.ACCOUNT_DAILY_METRICS),
                "period": "day",
                "metric_type": "total_value",
                "since": str(since),
                "until": str(until),
            },
        )
        follower_count = self.fetch_follower_count()

        logger.debug(f"Account insights for {self.instagram_business_id}: {daily}")

        return AccountInsights(
            follower_count=follower_count,
            daily_totals=metrics.aggregate_account_insights(daily, until),
        )

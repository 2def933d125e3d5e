"""Facebook Graph API services."""

from instasight.services.graph.auth import FacebookAuth, TokenGrant
from instasight.services.graph.client import FacebookGraphError, GraphClient, GraphRateLimitError
from instasight.services.graph.publisher import InstagramPublisher, PublishError, PublishResult

__all__ = [
    "FacebookAuth",
    "FacebookGraphError",
    "GraphClient",
    "GraphRateLimitError",
    "InstagramPublisher",
    "PublishError",
    "PublishResult",
    "TokenGrant",
]

"""Instagram image publishing service."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from instasight.services.graph.client import GraphClient

logger = logging.getLogger(__name__)


class PublishError(Exception):
    """Error during media publishing."""

    pass


@dataclass
class PublishResult:
    creation_id: str
    media_id: str


class InstagramPublisher:
    """Service for publishing image posts to Instagram."""

    CONTAINER_CHECK_INTERVAL = 2  # seconds
    CONTAINER_MAX_WAIT = 60

    def __init__(self, client: GraphClient):
        self.client = client

    def publish_image(self, image_url: str, caption: Optional[str] = None) -> PublishResult:
        """Publish a single image post.

        Args:
            image_url: URL of the image to publish (must be publicly accessible)
            caption: Optional caption for the post

        Returns:
            PublishResult with the container and published media IDs
        """
        creation_id = self.client.create_media_container(image_url=image_url, caption=caption)
        logger.info(f"Created media container {creation_id}")

        self._wait_for_container(creation_id)

        media_id = self.client.publish_media(creation_id)
        logger.info(f"Published media {media_id} from container {creation_id}")
        return PublishResult(creation_id=creation_id, media_id=media_id)

    def _wait_for_container(
        self,
        creation_id: str,
        max_wait: int = CONTAINER_MAX_WAIT,
    ) -> None:
        """Wait for a media container to be ready for publishing.

        Raises:
            PublishError: If the container fails or times out
        """
        elapsed = 0
        while elapsed < max_wait:
            status = self.client.check_container_status(creation_id)
            status_code = status.get("status_code")

            if status_code == "FINISHED":
                return
            if status_code in ("ERROR", "EXPIRED"):
                error_message = status.get("status", "Unknown error")
                raise PublishError(f"Container failed: {error_message}")

            time.sleep(self.CONTAINER_CHECK_INTERVAL)
            elapsed += self.CONTAINER_CHECK_INTERVAL

        raise PublishError(f"Container timed out after {max_wait} seconds")

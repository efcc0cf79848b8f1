"""Result publisher module for pub/sub event publishing."""

import logging
from typing import Callable
from pubsub import pub
from ..models.events import RecordingResultEvent

logger = logging.getLogger(__name__)

RESULT_TOPIC = "recording.result"


class ResultPublisher:
    """Publishes recording result events using pubsub.pub."""

    def __init__(self, topic: str = RESULT_TOPIC):
        """Initialize result publisher.

        Args:
            topic: Pub/sub topic name for recording results
        """
        self.topic = topic
        logger.info(f"ResultPublisher initialized with topic: {topic}")

    def publish_result(self, event: RecordingResultEvent) -> None:
        """Publish a recording result to the pub/sub topic.

        Args:
            event: RecordingResultEvent to publish
        """
        pub.sendMessage(self.topic, event=event)
        logger.debug(f"Published recording result: {event.file_path} (error={event.error is not None})")

    def get_callback(self) -> Callable[[RecordingResultEvent], None]:
        """Get callback function that publishes result events."""
        return self.publish_result

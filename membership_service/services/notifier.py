"""Member notification sinks.

Responsibilities:
- Deliver "send this message to this member" requests
- Log notifications locally, or publish them to Google Cloud Pub/Sub
"""

import threading
from typing import Optional, Protocol

from google.cloud import pubsub_v1

from membership_service.logging_config import get_logger
from membership_service.models.events import MemberNotification
from membership_service.models.member import MemberId
from membership_service.services.clock import Clock, SystemClock

logger = get_logger(__name__)


class NotificationError(Exception):
    """Raised when a notification cannot be delivered."""

    pass


class Notifier(Protocol):
    """Notification capability."""

    def send(self, message: str, member_id: MemberId) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the structured log.

    Sent notifications are kept in ``sent`` as (message, member_id) pairs.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.sent: list[tuple[str, MemberId]] = []

    def send(self, message: str, member_id: MemberId) -> None:
        with self._lock:
            self.sent.append((message, member_id))
        logger.info("notification_sent", member_id=member_id, message=message)

    def clear(self) -> None:
        with self._lock:
            self.sent.clear()


class PubSubNotifier:
    """Publishes member notifications to a Google Cloud Pub/Sub topic.

    Each notification is a JSON-encoded MemberNotification with the member id
    attached as a message attribute for subscription filtering.
    """

    def __init__(
            self,
            project_id: str,
            topic: str,
            publish_timeout: float = 5.0,
            clock: Optional[Clock] = None,
    ):
        self._lock = threading.RLock()
        self._publisher = pubsub_v1.PublisherClient()
        self._topic_path = self._publisher.topic_path(project_id, topic)
        self._publish_timeout = publish_timeout
        self._clock = clock or SystemClock()

        self._ensure_topic_exists()

        logger.info(
            "pubsub_notifier_initialized",
            project_id=project_id,
            topic=topic,
            topic_path=self._topic_path,
        )

    def _ensure_topic_exists(self) -> None:
        """Ensure the Pub/Sub topic exists, create it if it doesn't."""
        try:
            self._publisher.get_topic(request={"topic": self._topic_path})
            logger.info("pubsub_topic_exists", topic_path=self._topic_path)
        except Exception:
            try:
                topic = self._publisher.create_topic(request={"name": self._topic_path})
                logger.info("pubsub_topic_created", topic_path=topic.name)
            except Exception as e:
                logger.error(
                    "pubsub_topic_create_failed",
                    topic_path=self._topic_path,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                raise NotificationError(f"Cannot create topic {self._topic_path}: {e}") from e

    def send(self, message: str, member_id: MemberId) -> None:
        """Publish a notification for one member.

        Raises:
            NotificationError: If publishing fails or times out
        """
        notification = MemberNotification(
            member_id=member_id,
            message=message,
            event_time=self._clock.now().isoformat(),
        )
        data = notification.model_dump_json().encode("utf-8")

        with self._lock:
            try:
                future = self._publisher.publish(
                    self._topic_path,
                    data,
                    member_id=str(member_id),
                )
                message_id = future.result(timeout=self._publish_timeout)
            except Exception as e:
                logger.error(
                    "pubsub_publish_failed",
                    member_id=member_id,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                raise NotificationError(f"Failed to publish notification for member {member_id}") from e

        logger.info(
            "notification_published",
            member_id=member_id,
            message=message,
            message_id=message_id,
        )


def build_notifier(config=None, clock: Optional[Clock] = None) -> Notifier:
    """Create the notifier described by configuration.

    Args:
        config: Config instance (defaults to global configuration)
        clock: Time source used to stamp published notifications

    Raises:
        ValueError: If the pubsub backend is selected without pubsub settings
    """
    if config is None:
        from membership_service.config import get_config

        config = get_config()

    notifications = config.settings.notifications
    if notifications.backend == "pubsub":
        if notifications.pubsub is None:
            raise ValueError("notifications.pubsub must be configured for the pubsub backend")
        return PubSubNotifier(
            project_id=notifications.pubsub.project_id,
            topic=notifications.pubsub.topic,
            publish_timeout=notifications.pubsub.publish_timeout,
            clock=clock,
        )

    return LoggingNotifier()

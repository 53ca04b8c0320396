"""Unit tests for notification sinks."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock, patch

import pytest

from membership_service.models.settings import MembershipServiceConfig
from membership_service.services.clock import VirtualClock
from membership_service.services.notifier import (
    LoggingNotifier,
    NotificationError,
    PubSubNotifier,
    build_notifier,
)

TOPIC_PATH = "projects/membership-local/topics/member-notifications"


@pytest.fixture
def mock_publisher():
    publisher = Mock()
    publisher.topic_path.return_value = TOPIC_PATH
    future = Mock()
    future.result.return_value = "message-id-1"
    publisher.publish.return_value = future
    return publisher


class TestLoggingNotifier:
    """Tests for the log-backed notifier."""

    def test_send_records_message(self):
        notifier = LoggingNotifier()

        notifier.send("Subscription renewed!", 1)
        notifier.send("Membership expired", 2)

        assert notifier.sent == [("Subscription renewed!", 1), ("Membership expired", 2)]

    def test_clear(self):
        notifier = LoggingNotifier()
        notifier.send("Membership expired", 2)

        notifier.clear()

        assert notifier.sent == []


class TestPubSubNotifier:
    """Tests for the Pub/Sub notifier."""

    @patch("membership_service.services.notifier.pubsub_v1.PublisherClient")
    def test_send_publishes_json(self, mock_publisher_class, mock_publisher):
        mock_publisher_class.return_value = mock_publisher
        clock = VirtualClock(start=datetime(2026, 10, 16, tzinfo=timezone.utc))
        notifier = PubSubNotifier("membership-local", "member-notifications", clock=clock)

        notifier.send("Subscription renewed!", 1)

        mock_publisher.publish.assert_called_once()
        args, kwargs = mock_publisher.publish.call_args
        assert args[0] == TOPIC_PATH
        payload = json.loads(args[1].decode("utf-8"))
        assert payload["member_id"] == 1
        assert payload["message"] == "Subscription renewed!"
        assert payload["event_time"] == "2026-10-16T00:00:00+00:00"
        assert kwargs == {"member_id": "1"}

    @patch("membership_service.services.notifier.pubsub_v1.PublisherClient")
    def test_creates_missing_topic(self, mock_publisher_class, mock_publisher):
        mock_publisher_class.return_value = mock_publisher
        mock_publisher.get_topic.side_effect = Exception("not found")

        PubSubNotifier("membership-local", "member-notifications")

        mock_publisher.create_topic.assert_called_once_with(request={"name": TOPIC_PATH})

    @patch("membership_service.services.notifier.pubsub_v1.PublisherClient")
    def test_topic_creation_failure_raises(self, mock_publisher_class, mock_publisher):
        mock_publisher_class.return_value = mock_publisher
        mock_publisher.get_topic.side_effect = Exception("not found")
        mock_publisher.create_topic.side_effect = Exception("permission denied")

        with pytest.raises(NotificationError):
            PubSubNotifier("membership-local", "member-notifications")

    @patch("membership_service.services.notifier.pubsub_v1.PublisherClient")
    def test_publish_failure_raises(self, mock_publisher_class, mock_publisher):
        """Test delivery failures propagate to the caller."""
        mock_publisher_class.return_value = mock_publisher
        mock_publisher.publish.return_value.result.side_effect = TimeoutError("timed out")
        notifier = PubSubNotifier("membership-local", "member-notifications", publish_timeout=0.1)

        with pytest.raises(NotificationError, match="member 5"):
            notifier.send("Membership expired", 5)

        mock_publisher.publish.return_value.result.assert_called_once_with(timeout=0.1)


class TestBuildNotifier:
    """Tests for building the notifier from configuration."""

    def test_log_backend(self):
        config = MagicMock()
        config.settings = MembershipServiceConfig()

        assert isinstance(build_notifier(config), LoggingNotifier)

    @patch("membership_service.services.notifier.pubsub_v1.PublisherClient")
    def test_pubsub_backend(self, mock_publisher_class, mock_publisher):
        mock_publisher_class.return_value = mock_publisher
        config = MagicMock()
        config.settings = MembershipServiceConfig(
            notifications={
                "backend": "pubsub",
                "pubsub": {"project_id": "membership-local", "topic": "member-notifications"},
            }
        )

        assert isinstance(build_notifier(config), PubSubNotifier)

    def test_pubsub_backend_without_settings(self):
        config = MagicMock()
        config.settings = MembershipServiceConfig(notifications={"backend": "pubsub"})

        with pytest.raises(ValueError, match="notifications.pubsub"):
            build_notifier(config)

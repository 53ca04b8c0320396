"""Tests for member state change logging."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from membership_service.models.member import Member

NOW = datetime(2026, 10, 16, tzinfo=timezone.utc)


@pytest.fixture
def member():
    return Member(member_id=1, display_name="Anna", is_active=False, subscription_end=NOW)


class TestActivityChange:
    """Tests for Member.set_active logging."""

    def test_change_is_logged(self, member):
        with patch("membership_service.state_logger.logger") as logger:
            member.set_active(True, reason="Subscription renewed")

        assert member.is_active is True
        logger.info.assert_called_once_with(
            "member_activity_changed",
            member_id=1,
            old_value=False,
            new_value=True,
            reason="Subscription renewed",
        )

    def test_same_value_not_logged(self, member):
        with patch("membership_service.state_logger.logger") as logger:
            member.set_active(False)

        logger.info.assert_not_called()


class TestSubscriptionEndChange:
    """Tests for Member.extend_subscription logging."""

    def test_extension_is_logged(self, member):
        new_end = NOW + timedelta(days=30)

        with patch("membership_service.state_logger.logger") as logger:
            member.extend_subscription(new_end, reason="Renewal for 30 days")

        assert member.subscription_end == new_end
        logger.info.assert_called_once_with(
            "subscription_end_changed",
            member_id=1,
            old_end=NOW.isoformat(),
            new_end=new_end.isoformat(),
            reason="Renewal for 30 days",
        )

    def test_first_subscription_logs_none(self):
        member = Member(member_id="new")

        with patch("membership_service.state_logger.logger") as logger:
            member.extend_subscription(NOW, reason="Renewal for 1 days")

        assert logger.info.call_args.kwargs["old_end"] is None


class TestMemberModel:
    """Tests for Member helpers."""

    def test_naive_end_assumed_utc(self):
        member = Member(member_id=1, subscription_end=datetime(2026, 1, 1))

        assert member.subscription_end == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_naive_end_assigned_later_assumed_utc(self):
        member = Member(member_id=1)

        member.subscription_end = datetime(2026, 1, 1)

        assert member.subscription_end == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert member.is_expired_at(NOW)

    def test_is_expired_at(self, member):
        assert member.is_expired_at(NOW)
        assert member.is_expired_at(NOW + timedelta(seconds=1))
        assert not member.is_expired_at(NOW - timedelta(seconds=1))

    def test_no_end_never_expires(self):
        assert not Member(member_id=1).is_expired_at(NOW + timedelta(days=36500))

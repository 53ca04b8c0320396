"""Unit tests for clocks."""

from datetime import datetime, timedelta, timezone

import pytest

from membership_service.services.clock import SystemClock, VirtualClock

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return VirtualClock(start=START)


class TestSystemClock:
    """Tests for the wall clock."""

    def test_now_is_utc_and_current(self):
        now = SystemClock().now()

        assert now.tzinfo is not None
        assert abs(now - datetime.now(timezone.utc)) < timedelta(seconds=1)


class TestVirtualClockBasics:
    """Tests for basic virtual clock functionality."""

    def test_defaults_to_real_time(self):
        """Test the virtual clock starts near real time."""
        clock = VirtualClock()

        assert abs(clock.now() - datetime.now(timezone.utc)) < timedelta(seconds=1)

    def test_time_does_not_move_on_its_own(self, clock):
        """Test repeated reads return the same instant."""
        assert clock.now() == clock.now() == START

    def test_advance_time_by_days(self, clock):
        result = clock.advance_time(days=30)

        assert clock.now() == START + timedelta(days=30)
        assert result["old_time"] == START
        assert result["new_time"] == START + timedelta(days=30)
        assert result["time_advanced"] == timedelta(days=30)
        assert clock.offset == timedelta(days=30)

    def test_advance_time_mixed_units(self, clock):
        clock.advance_time(days=1, hours=2, minutes=3)

        assert clock.now() == START + timedelta(days=1, hours=2, minutes=3)

    def test_advance_by_zero_is_noop(self, clock):
        result = clock.advance_time()

        assert result["old_time"] == result["new_time"] == START

    @pytest.mark.parametrize("kwargs", [{"days": -1}, {"hours": -1}, {"minutes": -1}])
    def test_negative_advance_rejected(self, clock, kwargs):
        with pytest.raises(ValueError, match="backwards"):
            clock.advance_time(**kwargs)

        assert clock.now() == START


class TestVirtualClockJumps:
    """Tests for set_time and reset_time."""

    def test_set_time_forward(self, clock):
        target = START + timedelta(days=400)

        result = clock.set_time(target)

        assert clock.now() == target
        assert result == {"old_time": START, "new_time": target}
        assert clock.offset == timedelta(days=400)

    def test_set_time_backwards_rejected(self, clock):
        with pytest.raises(ValueError, match="cannot set time backwards"):
            clock.set_time(START - timedelta(seconds=1))

    def test_reset_time(self, clock):
        clock.advance_time(days=10)

        result = clock.reset_time()

        assert result["old_time"] == START + timedelta(days=10)
        assert abs(clock.now() - datetime.now(timezone.utc)) < timedelta(seconds=1)
        assert clock.offset == timedelta(0)

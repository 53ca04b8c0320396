"""Time sources for the lifecycle services.

Responsibilities:
- Provide the current instant to renewal and expiration sweeps
- Offer a virtual clock that can be fast-forwarded for local testing
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from membership_service.logging_config import get_logger

logger = get_logger(__name__)


class Clock(Protocol):
    """Time source capability."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class VirtualClock:
    """Virtual clock for time manipulation and fast-forwarding.

    Starts at the real current time and only moves when explicitly advanced,
    so repeated reads return the same instant.

    Args:
        start: optional starting instant, defaults to the real current time
    """

    def __init__(self, start: Optional[datetime] = None) -> None:
        # thread safety lock
        self._lock = threading.RLock()
        self._virtual_time = start or datetime.now(timezone.utc)
        self._offset = timedelta(0)

        logger.info(
            "virtual_clock_initialized",
            virtual_time=self._virtual_time.isoformat(),
        )

    def now(self) -> datetime:
        """Get the current virtual time."""
        with self._lock:
            return self._virtual_time

    @property
    def offset(self) -> timedelta:
        """Total time the clock has been moved ahead since the last reset."""
        with self._lock:
            return self._offset

    def advance_time(self, days: int = 0, hours: int = 0, minutes: int = 0) -> dict:
        """Advance virtual time (days, hours, minutes).

        Args:
            days: number of days to advance
            hours: number of hours to advance
            minutes: number of minutes to advance

        Returns:
            Dictionary with:
                - old_time: time before advancement
                - new_time: time after advancement
                - time_advanced: amount of time advanced

        Raises:
            ValueError: if any value is negative
        """
        if days < 0 or hours < 0 or minutes < 0:
            raise ValueError("Cannot advance time backwards, negative values are not allowed.")

        delta = timedelta(days=days, hours=hours, minutes=minutes)

        with self._lock:
            old_time = self._virtual_time
            self._virtual_time = old_time + delta
            self._offset += delta
            new_time = self._virtual_time

        if delta:
            logger.info(
                "time_advanced",
                old_time=old_time.isoformat(),
                new_time=new_time.isoformat(),
                days=days,
                hours=hours,
                minutes=minutes,
            )

        return {
            "old_time": old_time,
            "new_time": new_time,
            "time_advanced": delta,
        }

    def set_time(self, instant: datetime) -> dict:
        """Set virtual time to a specific instant.

        Args:
            instant: timezone-aware instant to jump to

        Returns:
            Dictionary with old_time and new_time

        Raises:
            ValueError: If the instant is before the current virtual time
        """
        with self._lock:
            old_time = self._virtual_time

            if instant < old_time:
                raise ValueError(
                    f"cannot set time backwards, current: {old_time.isoformat()}, "
                    f"requested: {instant.isoformat()}"
                )

            self._offset += instant - old_time
            self._virtual_time = instant

        logger.info(
            "time_set",
            old_time=old_time.isoformat(),
            new_time=instant.isoformat(),
        )

        return {"old_time": old_time, "new_time": instant}

    def reset_time(self) -> dict:
        """Reset virtual time back to real current time."""
        with self._lock:
            old_time = self._virtual_time
            real_now = datetime.now(timezone.utc)
            self._virtual_time = real_now
            self._offset = timedelta(0)

        logger.info(
            "time_reset",
            old_time=old_time.isoformat(),
            new_time=real_now.isoformat(),
        )

        return {"old_time": old_time, "new_time": real_now}


_clock_instance: Optional[Clock] = None
_clock_lock = threading.Lock()


def get_clock() -> Clock:
    """Get the global clock, virtual or system depending on configuration."""
    global _clock_instance
    if _clock_instance is None:
        with _clock_lock:
            if _clock_instance is None:
                from membership_service.config import get_config

                if get_config().use_virtual_clock:
                    _clock_instance = VirtualClock()
                else:
                    _clock_instance = SystemClock()
    return _clock_instance


def reset_clock() -> None:
    """Drop the global clock so the next get_clock() recreates it."""
    global _clock_instance
    with _clock_lock:
        _clock_instance = None

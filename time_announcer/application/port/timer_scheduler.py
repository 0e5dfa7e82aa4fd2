from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

Clock = Callable[[], datetime]
Dispatcher = Callable[[Callable[[], None]], None]


class RepeatingTimer(Protocol):
    def cancel(self) -> None:
        """Stop future fires. Safe to call more than once."""
        ...


class TimerScheduler(Protocol):
    def schedule_repeating(
        self,
        *,
        first_fire: datetime,
        interval: timedelta,
        callback: Callable[[], None],
    ) -> RepeatingTimer:
        """Fire `callback` at `first_fire` and then every `interval`."""
        ...

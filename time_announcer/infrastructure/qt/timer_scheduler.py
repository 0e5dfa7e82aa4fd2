from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timedelta

from PySide6.QtCore import QObject, Qt, QTimer

from time_announcer.application.port.timer_scheduler import Clock
from time_announcer.application.scheduling import elapsed_between, next_fire_after


class QtRepeatingTimer(QObject):
    """Fixed-rate repeating timer on the Qt event loop.

    Each fire re-arms a single-shot timer against the absolute schedule
    (`first_fire + n * interval`), so event-loop latency never accumulates.
    """

    def __init__(
        self,
        *,
        first_fire: datetime,
        interval: timedelta,
        callback: Callable[[], None],
        clock: Clock,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.first_fire = first_fire
        self.interval = interval
        self.callback = callback
        self.clock = clock
        self.next_fire = first_fire
        self._cancelled = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)
        self._arm()

    @property
    def is_active(self) -> bool:
        return not self._cancelled and self._timer.isActive()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._timer.stop()

    def _arm(self) -> None:
        delay = elapsed_between(self.clock(), self.next_fire)
        self._timer.start(max(0, math.ceil(delay / timedelta(milliseconds=1))))

    def _on_timeout(self) -> None:
        if self._cancelled:
            return

        now = self.clock()
        if elapsed_between(now, self.next_fire) > timedelta(0):
            # Woke up early (coarse OS timer); wait for the real instant.
            self._arm()
            return

        self.next_fire = next_fire_after(self.first_fire, self.interval, now)
        self._arm()
        self.callback()


class QtTimerScheduler:
    def __init__(self, *, clock: Clock, parent: QObject | None = None) -> None:
        self.clock = clock
        self.parent = parent

    def schedule_repeating(
        self,
        *,
        first_fire: datetime,
        interval: timedelta,
        callback: Callable[[], None],
    ) -> QtRepeatingTimer:
        return QtRepeatingTimer(
            first_fire=first_fire,
            interval=interval,
            callback=callback,
            clock=self.clock,
            parent=self.parent,
        )

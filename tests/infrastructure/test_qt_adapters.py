"""Unit tests for the Qt timer scheduler and dispatcher."""
from __future__ import annotations

import os
import unittest
from datetime import datetime, timedelta, timezone
from threading import Thread, get_ident
from zoneinfo import ZoneInfo

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QEventLoop, QTimer  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from time_announcer.application.scheduling import (  # noqa: E402
    elapsed_between,
    next_minute_boundary,
)
from time_announcer.infrastructure.qt.dispatcher import QtDispatcher  # noqa: E402
from time_announcer.infrastructure.qt.timer_scheduler import QtTimerScheduler  # noqa: E402


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestQtTimerScheduler(unittest.TestCase):
    """Test cases for QtTimerScheduler."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FakeClock(datetime(2024, 6, 1, 14, 59, 30, tzinfo=timezone.utc))
        self.scheduler = QtTimerScheduler(clock=self.clock)
        self.fired: list[datetime] = []

    def _schedule(self):
        return self.scheduler.schedule_repeating(
            first_fire=datetime(2024, 6, 1, 15, 0, tzinfo=timezone.utc),
            interval=timedelta(seconds=60),
            callback=lambda: self.fired.append(self.clock()),
        )

    def test_first_fire_is_armed_for_the_boundary(self):
        """Test that the single-shot timer waits until the first fire time."""
        timer = self._schedule()
        try:
            self.assertTrue(timer.is_active)
            remaining = timer._timer.remainingTime()
            self.assertGreater(remaining, 29_000)
            self.assertLessEqual(remaining, 30_000)
        finally:
            timer.cancel()

    def test_timeout_fires_and_rearms_on_fixed_schedule(self):
        """Test that each fire re-arms against the absolute schedule."""
        timer = self._schedule()
        try:
            self.clock.now = datetime(2024, 6, 1, 15, 0, 0, 40_000, tzinfo=timezone.utc)
            timer._on_timeout()

            self.assertEqual(len(self.fired), 1)
            self.assertEqual(
                timer.next_fire, datetime(2024, 6, 1, 15, 1, tzinfo=timezone.utc)
            )
            self.assertLessEqual(timer._timer.remainingTime(), 59_960)
        finally:
            timer.cancel()

    def test_early_wakeup_does_not_fire(self):
        """Test that a timeout before the fire time only re-arms."""
        timer = self._schedule()
        try:
            self.clock.now = datetime(2024, 6, 1, 14, 59, 59, 999_000, tzinfo=timezone.utc)
            timer._on_timeout()
            self.assertEqual(self.fired, [])
            self.assertEqual(timer.next_fire, timer.first_fire)
        finally:
            timer.cancel()

    def test_cancel_is_idempotent_and_silences_timer(self):
        """Test that cancel stops the timer and later timeouts are ignored."""
        timer = self._schedule()
        timer.cancel()
        timer.cancel()

        self.clock.now = datetime(2024, 6, 1, 15, 5, tzinfo=timezone.utc)
        timer._on_timeout()

        self.assertFalse(timer.is_active)
        self.assertEqual(self.fired, [])


class TestQtTimerSchedulerAcrossDst(unittest.TestCase):
    """Test cases for QtTimerScheduler with a DST zone clock."""

    NEW_YORK = ZoneInfo("America/New_York")

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        """Set up test fixtures."""
        self.fired: list[datetime] = []

    def _schedule(self, now: datetime):
        self.clock = FakeClock(now)
        scheduler = QtTimerScheduler(clock=self.clock)
        return scheduler.schedule_repeating(
            first_fire=next_minute_boundary(now),
            interval=timedelta(seconds=60),
            callback=lambda: self.fired.append(self.clock()),
        )

    def _run_minutes(self, timer, count: int) -> None:
        # Wake 40ms late each time, as the event loop would.
        for _ in range(count):
            self.clock.now = (
                timer.next_fire.astimezone(timezone.utc) + timedelta(milliseconds=40)
            ).astimezone(self.NEW_YORK)
            timer._on_timeout()

    def assertFiresEveryMinute(self, timer) -> None:
        for earlier, later in zip(self.fired, self.fired[1:]):
            self.assertEqual(elapsed_between(earlier, later), timedelta(seconds=60))
        remaining = timer._timer.remainingTime()
        self.assertGreater(remaining, 59_000)
        self.assertLessEqual(remaining, 59_960)

    def test_fall_back_arms_for_thirty_seconds(self):
        """Test that 01:59:30 EDT arms for 01:00 EST thirty seconds later."""
        timer = self._schedule(datetime(2024, 11, 3, 1, 59, 30, tzinfo=self.NEW_YORK))
        try:
            remaining = timer._timer.remainingTime()
            self.assertGreater(remaining, 29_000)
            self.assertLessEqual(remaining, 30_000)
        finally:
            timer.cancel()

    def test_fall_back_does_not_fire_early(self):
        """Test that 01:59:59 EDT is still before the 01:00 EST fire."""
        timer = self._schedule(datetime(2024, 11, 3, 1, 59, 30, tzinfo=self.NEW_YORK))
        try:
            self.clock.now = datetime(2024, 11, 3, 1, 59, 59, 999_000, tzinfo=self.NEW_YORK)
            timer._on_timeout()
            self.assertEqual(self.fired, [])
        finally:
            timer.cancel()

    def test_fall_back_fires_every_minute_through_repeated_hour(self):
        """Test that the repeated hour gets one fire per real minute."""
        timer = self._schedule(datetime(2024, 11, 3, 1, 59, 30, tzinfo=self.NEW_YORK))
        try:
            self._run_minutes(timer, 5)
            self.assertEqual(len(self.fired), 5)
            self.assertEqual(self.fired[0].utcoffset(), timedelta(hours=-5))
            self.assertFiresEveryMinute(timer)
        finally:
            timer.cancel()

    def test_spring_forward_arms_for_thirty_seconds(self):
        """Test that 01:59:30 EST arms for 03:00 EDT thirty seconds later."""
        timer = self._schedule(datetime(2024, 3, 10, 1, 59, 30, tzinfo=self.NEW_YORK))
        try:
            remaining = timer._timer.remainingTime()
            self.assertGreater(remaining, 29_000)
            self.assertLessEqual(remaining, 30_000)

            self._run_minutes(timer, 3)
            self.assertEqual(len(self.fired), 3)
            self.assertEqual((self.fired[0].hour, self.fired[0].minute), (3, 0))
            self.assertFiresEveryMinute(timer)
        finally:
            timer.cancel()


class TestQtDispatcher(unittest.TestCase):
    """Test cases for QtDispatcher."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def test_dispatch_from_worker_thread_runs_on_owner_thread(self):
        """Test that callables dispatched from another thread run on the GUI thread."""
        dispatcher = QtDispatcher()
        ran_on: list[int] = []
        loop = QEventLoop()

        def job():
            ran_on.append(get_ident())
            loop.quit()

        worker = Thread(target=lambda: dispatcher.dispatch(job))
        worker.start()
        worker.join(timeout=5)

        QTimer.singleShot(5_000, loop.quit)
        loop.exec()

        self.assertEqual(len(ran_on), 1)
        self.assertEqual(ran_on[0], get_ident())


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from datetime import datetime, tzinfo

from time_announcer.application.port.timer_scheduler import Clock


def make_clock(tz: tzinfo | None = None) -> Clock:
    """Return a clock producing timezone-aware "now" values.

    Without `tz` the system local zone is used, re-read on every call so a
    zone change on the host is picked up.
    """

    def now() -> datetime:
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz)

    return now

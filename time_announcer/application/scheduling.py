from __future__ import annotations

from datetime import datetime, timedelta, timezone

from time_announcer.application.errors import SchedulingError

ANNOUNCEMENT_INTERVAL = timedelta(seconds=60)


def next_minute_boundary(now: datetime) -> datetime:
    """Return the first instant strictly after `now` with zero seconds.

    The boundary is found on the UTC timeline and converted back to the zone
    of `now`, so wall-clock jumps (DST, month or year rollovers) resolve to the
    real next minute instead of a non-existent or repeated local time.
    """

    if now.tzinfo is None or now.utcoffset() is None:
        raise SchedulingError("now must be timezone-aware.")

    try:
        utc_now = now.astimezone(timezone.utc)
        boundary = utc_now.replace(second=0, microsecond=0) + timedelta(minutes=1)
        local = boundary.astimezone(now.tzinfo)
    except OverflowError as exc:
        raise SchedulingError(f"No minute boundary after {now.isoformat()}.") from exc

    # Zones with sub-minute offsets (historic LMT) put the UTC boundary
    # off the local minute.
    if local.second or local.microsecond:
        raise SchedulingError(
            f"UTC offset of {now.tzinfo} is not a whole number of minutes."
        )
    return local


def elapsed_between(earlier: datetime, later: datetime) -> timedelta:
    """Real time from `earlier` to `later`, measured on the UTC timeline.

    Same-zone datetimes subtract as wall-clock values in Python, which is off
    by the DST shift across a transition.
    """

    return later.astimezone(timezone.utc) - earlier.astimezone(timezone.utc)


def next_fire_after(first_fire: datetime, interval: timedelta, now: datetime) -> datetime:
    """Return the first fire time of a fixed-rate schedule strictly after `now`.

    Fires missed while the process was busy or suspended are skipped. Fire
    times are spaced by `interval` of real time and returned in the zone of
    `first_fire`.
    """

    if interval <= timedelta(0):
        raise SchedulingError("interval must be positive.")

    elapsed = elapsed_between(first_fire, now)
    if elapsed < timedelta(0):
        return first_fire

    missed = elapsed // interval + 1
    utc_fire = first_fire.astimezone(timezone.utc) + missed * interval
    return utc_fire.astimezone(first_fire.tzinfo)

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_LOG_DIR = "logs"
DEFAULT_PERSONAL_VOICE_MARKERS = ("personalvoice", "personal voice")
PERSONAL_VOICE_ACCESS_VALUES = ("granted", "denied")


@dataclass(frozen=True)
class SpeechConfig:
    personal_voice_access: str = "granted"
    personal_voice_markers: tuple[str, ...] = DEFAULT_PERSONAL_VOICE_MARKERS
    rate: int | None = None
    volume: float | None = None
    preferred_voice_id: str | None = None


@dataclass(frozen=True)
class AppConfig:
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    timezone: str | None = None
    locale: str | None = None
    log_dir: str = DEFAULT_LOG_DIR

    @staticmethod
    def from_env() -> "AppConfig":
        access = (os.getenv("TIME_ANNOUNCER_PERSONAL_VOICE_ACCESS") or "granted").strip().lower()
        if access not in PERSONAL_VOICE_ACCESS_VALUES:
            raise ValueError(
                "TIME_ANNOUNCER_PERSONAL_VOICE_ACCESS must be 'granted' or 'denied'."
            )

        markers_raw = os.getenv("TIME_ANNOUNCER_PERSONAL_VOICE_MARKERS")
        markers = DEFAULT_PERSONAL_VOICE_MARKERS
        if markers_raw:
            markers = tuple(m.strip().lower() for m in markers_raw.split(",") if m.strip())
            if not markers:
                raise ValueError(
                    "TIME_ANNOUNCER_PERSONAL_VOICE_MARKERS must list at least one marker."
                )

        rate: int | None = None
        rate_raw = os.getenv("TIME_ANNOUNCER_SPEECH_RATE")
        if rate_raw:
            try:
                rate = int(rate_raw)
            except ValueError as exc:
                raise ValueError(
                    "TIME_ANNOUNCER_SPEECH_RATE must be an integer (words per minute)."
                ) from exc
            if rate <= 0:
                raise ValueError("TIME_ANNOUNCER_SPEECH_RATE must be positive.")

        volume: float | None = None
        volume_raw = os.getenv("TIME_ANNOUNCER_SPEECH_VOLUME")
        if volume_raw:
            try:
                volume = float(volume_raw)
            except ValueError as exc:
                raise ValueError(
                    "TIME_ANNOUNCER_SPEECH_VOLUME must be a number between 0.0 and 1.0."
                ) from exc
            if not 0.0 <= volume <= 1.0:
                raise ValueError(
                    "TIME_ANNOUNCER_SPEECH_VOLUME must be a number between 0.0 and 1.0."
                )

        config = AppConfig(
            speech=SpeechConfig(
                personal_voice_access=access,
                personal_voice_markers=markers,
                rate=rate,
                volume=volume,
                preferred_voice_id=os.getenv("TIME_ANNOUNCER_VOICE_ID") or None,
            ),
            timezone=os.getenv("TIME_ANNOUNCER_TIMEZONE") or None,
            locale=os.getenv("TIME_ANNOUNCER_LOCALE") or None,
            log_dir=os.getenv("TIME_ANNOUNCER_LOG_DIR") or DEFAULT_LOG_DIR,
        )
        # Fail fast on a bad zone name instead of at the first announcement.
        config.resolve_timezone()
        return config

    def resolve_timezone(self) -> tzinfo | None:
        """Return the configured zone, or None for the system local zone."""

        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"TIME_ANNOUNCER_TIMEZONE is not a known IANA zone: {self.timezone}"
            ) from exc

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir)

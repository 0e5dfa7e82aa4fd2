from __future__ import annotations

from dataclasses import dataclass

from time_announcer.application.announcement_controller import AnnouncementController
from time_announcer.application.port.authorization_service import AuthorizationService
from time_announcer.application.port.speech_engine import SpeechEngine
from time_announcer.application.port.timer_scheduler import Clock, Dispatcher, TimerScheduler
from time_announcer.application.port.voice_catalog import VoiceCatalog
from time_announcer.config import AppConfig
from time_announcer.infrastructure.pyttsx3.authorization_service import Pyttsx3AuthorizationService
from time_announcer.infrastructure.pyttsx3.speech_engine import Pyttsx3SpeechEngine
from time_announcer.infrastructure.pyttsx3.voice_catalog import Pyttsx3VoiceCatalog
from time_announcer.infrastructure.qt.dispatcher import QtDispatcher
from time_announcer.infrastructure.qt.timer_scheduler import QtTimerScheduler
from time_announcer.utils.clock import make_clock
from time_announcer.utils.locale import format_short_time, resolve_locale
from time_announcer.utils.logger import Logger


@dataclass(frozen=True)
class AppContainer:
    config: AppConfig
    logger: Logger
    clock: Clock
    authorization_service: AuthorizationService
    voice_catalog: VoiceCatalog
    speech_engine: SpeechEngine
    scheduler: TimerScheduler
    controller: AnnouncementController


def build_container(
    config: AppConfig,
    *,
    logger: Logger | None = None,
    clock: Clock | None = None,
    authorization_service: AuthorizationService | None = None,
    voice_catalog: VoiceCatalog | None = None,
    speech_engine: SpeechEngine | None = None,
    scheduler: TimerScheduler | None = None,
    dispatch: Dispatcher | None = None,
) -> AppContainer:
    """Wire the app. Must run on the GUI thread after QApplication exists."""

    clock = clock or make_clock(config.resolve_timezone())
    logger = logger or Logger(log_dir=config.log_path, clock=clock)

    authorization_service = authorization_service or Pyttsx3AuthorizationService(
        personal_voice_access=config.speech.personal_voice_access,
        logger=logger,
    )
    voice_catalog = voice_catalog or Pyttsx3VoiceCatalog(
        personal_voice_markers=config.speech.personal_voice_markers,
    )
    speech_engine = speech_engine or Pyttsx3SpeechEngine(
        rate=config.speech.rate,
        volume=config.speech.volume,
        logger=logger,
    )
    scheduler = scheduler or QtTimerScheduler(clock=clock)
    dispatch = dispatch or QtDispatcher().dispatch

    locale = resolve_locale(config.locale)
    controller = AnnouncementController(
        authorization_service=authorization_service,
        voice_catalog=voice_catalog,
        speech_engine=speech_engine,
        scheduler=scheduler,
        clock=clock,
        time_formatter=lambda value: format_short_time(value, locale),
        logger=logger,
        dispatch=dispatch,
        preferred_voice_id=config.speech.preferred_voice_id,
    )

    return AppContainer(
        config=config,
        logger=logger,
        clock=clock,
        authorization_service=authorization_service,
        voice_catalog=voice_catalog,
        speech_engine=speech_engine,
        scheduler=scheduler,
        controller=controller,
    )

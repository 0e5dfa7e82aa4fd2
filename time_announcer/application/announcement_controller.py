from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import replace
from datetime import datetime
from threading import Lock

from time_announcer.application.errors import SchedulingError, SpeechEngineError, VoiceCatalogError
from time_announcer.application.port.authorization_service import AuthorizationService
from time_announcer.application.port.speech_engine import SpeechEngine
from time_announcer.application.port.timer_scheduler import (
    Clock,
    Dispatcher,
    RepeatingTimer,
    TimerScheduler,
)
from time_announcer.application.port.voice_catalog import VoiceCatalog
from time_announcer.application.scheduling import ANNOUNCEMENT_INTERVAL, next_minute_boundary
from time_announcer.domain.vo.announcement_session import AnnouncementSession
from time_announcer.domain.vo.authorization_state import AuthorizationState
from time_announcer.domain.vo.voice import Utterance, VoiceDescriptor
from time_announcer.utils.logger import Logger

SessionObserver = Callable[[AnnouncementSession], None]


def _run_inline(fn: Callable[[], None]) -> None:
    fn()


class AnnouncementController:
    """Gates time announcements on personal voice access and runs the minute loop.

    All state mutation happens on the execution context behind `dispatch`
    (the GUI thread in the app). The authorization future completes elsewhere;
    voices are listed on that thread and the result is dispatched back before use.
    """

    ANNOUNCEMENT_PREFIX = "The time is"

    def __init__(
        self,
        *,
        authorization_service: AuthorizationService,
        voice_catalog: VoiceCatalog,
        speech_engine: SpeechEngine,
        scheduler: TimerScheduler,
        clock: Clock,
        time_formatter: Callable[[datetime], str],
        logger: Logger | None = None,
        dispatch: Dispatcher | None = None,
        preferred_voice_id: str | None = None,
        session: AnnouncementSession | None = None,
    ) -> None:
        self.authorization_service = authorization_service
        self.voice_catalog = voice_catalog
        self.speech_engine = speech_engine
        self.scheduler = scheduler
        self.clock = clock
        self.time_formatter = time_formatter
        self.logger = logger
        self._dispatch = dispatch or _run_inline

        self._session = session or AnnouncementSession(selected_voice_id=preferred_voice_id)
        self._observers: list[SessionObserver] = []
        self._timer: RepeatingTimer | None = None
        self._authorization_requested = False
        self._request_lock = Lock()

    @property
    def session(self) -> AnnouncementSession:
        return self._session

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register `observer` for every session change; returns an unsubscribe callable."""
        if observer not in self._observers:
            self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def request_authorization(self) -> None:
        with self._request_lock:
            if self._authorization_requested:
                return
            self._authorization_requested = True

        self._log("Requesting Personal Voice authorization...")
        future = self.authorization_service.request_authorization()
        future.add_done_callback(self._on_authorization_done)

    def select_voice(self, voice_id: str | None) -> None:
        if voice_id is not None and not any(
            voice.id == voice_id for voice in self._session.available_voices
        ):
            raise ValueError(f"Unknown voice id: {voice_id}")
        if voice_id == self._session.selected_voice_id:
            return
        self._update(selected_voice_id=voice_id)

    def toggle(self) -> None:
        if self._session.is_active:
            self._stop()
            return
        if not self._session.can_toggle:
            self._log("Cannot start: Personal Voice is not available.")
            return
        self._start()

    def announce_once(self) -> None:
        voice = self._session.selected_voice
        if voice is None:
            self._log("Selected voice is no longer available. Stopping.")
            self._stop()
            return

        text = f"{self.ANNOUNCEMENT_PREFIX} {self.time_formatter(self.clock())}"
        utterance = Utterance(
            text=text,
            voice_id=voice.id,
            prefers_assistive_technology_settings=True,
        )
        try:
            self.speech_engine.speak(utterance)
        except SpeechEngineError as e:
            self._log(f"Speech engine error: {e}")
            return
        self._log(f"Announcer ({voice.name}): {text}")

    def shutdown(self) -> None:
        if self._session.is_active:
            self._stop()
        self._cancel_timer()

    def _on_authorization_done(self, future: Future[AuthorizationState]) -> None:
        # May run on the authorization thread.
        try:
            state = future.result()
        except Exception as e:
            self._log(f"Personal Voice authorization failed: {e}")
            state = AuthorizationState.UNSUPPORTED

        # Slow drivers enumerate here, off the GUI thread.
        voices: tuple[VoiceDescriptor, ...] = ()
        if state is AuthorizationState.AUTHORIZED:
            voices = self._load_personal_voices()

        self._dispatch(lambda: self._apply_authorization(state, voices))

    def _apply_authorization(
        self, state: AuthorizationState, voices: tuple[VoiceDescriptor, ...]
    ) -> None:
        if self._session.authorization_state.is_terminal:
            return

        self._log(f"Personal Voice authorization: {state.value}")
        if state is not AuthorizationState.AUTHORIZED:
            self._update(authorization_state=state)
            return

        selected = self._session.selected_voice_id
        if selected is not None and all(voice.id != selected for voice in voices):
            self._log(f"Voice {selected} is not installed; picking another.")
            selected = None
        if selected is None and voices:
            selected = voices[0].id
        self._update(
            authorization_state=state,
            available_voices=voices,
            selected_voice_id=selected,
        )

    def _load_personal_voices(self) -> tuple[VoiceDescriptor, ...]:
        try:
            voices = self.voice_catalog.list_voices()
        except VoiceCatalogError as e:
            self._log(f"Could not list voices: {e}")
            return ()

        personal = tuple(voice for voice in voices if voice.is_personal)
        self._log(f"Found {len(personal)} Personal Voice(s).")
        return personal

    def _start(self) -> None:
        self._update(is_active=True)
        # Speak right away; the minute loop starts at the next boundary.
        self.announce_once()
        if not self._session.is_active:
            return

        now = self.clock()
        try:
            first_fire = next_minute_boundary(now)
        except SchedulingError as e:
            self._log(f"Falling back to a fixed 60s interval: {e}")
            first_fire = now + ANNOUNCEMENT_INTERVAL

        self._cancel_timer()
        self._timer = self.scheduler.schedule_repeating(
            first_fire=first_fire,
            interval=ANNOUNCEMENT_INTERVAL,
            callback=self._on_timer_fired,
        )
        self._log(f"Next announcement at {first_fire.isoformat(timespec='seconds')}")

    def _stop(self) -> None:
        self._cancel_timer()
        if not self._session.is_active:
            return
        self._update(is_active=False)
        try:
            self.speech_engine.stop_speaking()
        except SpeechEngineError as e:
            self._log(f"Speech engine error while stopping: {e}")
        self._log("Stopped announcing the time.")

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _on_timer_fired(self) -> None:
        if not self._session.is_active:
            return
        self.announce_once()

    def _update(self, **changes: object) -> None:
        session = replace(self._session, **changes)
        if session.is_active and not session.can_toggle:
            session = replace(session, is_active=False)
        if session == self._session:
            return

        self._session = session
        for observer in list(self._observers):
            observer(session)

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from threading import Thread
from typing import Any

import pyttsx3

from time_announcer.application.errors import AuthorizationError
from time_announcer.domain.vo.authorization_state import AuthorizationState
from time_announcer.utils.logger import Logger


class Pyttsx3AuthorizationService:
    """Decides whether Personal Voices may be used on this machine.

    Unsupported when no speech driver can be loaded, denied when the user
    has turned off Personal Voice access, otherwise authorized.
    """

    def __init__(
        self,
        *,
        personal_voice_access: str = "granted",
        engine_factory: Callable[[], Any] = pyttsx3.init,
        logger: Logger | None = None,
    ):
        self.personal_voice_access = personal_voice_access
        self._engine_factory = engine_factory
        self.logger = logger

    def request_authorization(self) -> Future[AuthorizationState]:
        future: Future[AuthorizationState] = Future()
        future.set_running_or_notify_cancel()

        thread = Thread(target=self._resolve, args=(future,), daemon=True)
        thread.start()
        return future

    def _resolve(self, future: Future[AuthorizationState]) -> None:
        try:
            future.set_result(self._check())
        except Exception as e:
            future.set_exception(AuthorizationError(str(e)))

    def _check(self) -> AuthorizationState:
        try:
            self._engine_factory()
        except (OSError, RuntimeError, KeyError, ImportError) as e:
            self._log(f"Speech driver unavailable: {e}")
            return AuthorizationState.UNSUPPORTED

        if self.personal_voice_access == "denied":
            return AuthorizationState.DENIED
        return AuthorizationState.AUTHORIZED

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)

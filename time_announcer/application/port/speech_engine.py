from __future__ import annotations

from typing import Protocol

from time_announcer.domain.vo.voice import Utterance


class SpeechEngine(Protocol):
    def speak(self, utterance: Utterance) -> None:
        """Queue an utterance for playback and return immediately."""
        ...

    def stop_speaking(self) -> None:
        """Interrupt the current utterance and drop anything still queued."""
        ...

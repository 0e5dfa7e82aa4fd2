from __future__ import annotations

from typing import Protocol

from time_announcer.domain.vo.voice import VoiceDescriptor


class VoiceCatalog(Protocol):
    def list_voices(self) -> list[VoiceDescriptor]:
        """Return every voice installed on the device."""
        ...

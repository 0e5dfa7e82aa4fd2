from __future__ import annotations

from dataclasses import dataclass

from time_announcer.domain.vo.authorization_state import AuthorizationState
from time_announcer.domain.vo.voice import VoiceDescriptor


@dataclass(frozen=True)
class AnnouncementSession:
    """Snapshot of everything the UI needs to render the announcer.

    `is_active` may only be true while `can_toggle` holds.
    """

    authorization_state: AuthorizationState = AuthorizationState.UNKNOWN
    available_voices: tuple[VoiceDescriptor, ...] = ()
    selected_voice_id: str | None = None
    is_active: bool = False

    @property
    def is_authorized(self) -> bool:
        return self.authorization_state is AuthorizationState.AUTHORIZED

    @property
    def can_toggle(self) -> bool:
        return self.is_authorized and bool(self.available_voices)

    @property
    def selected_voice(self) -> VoiceDescriptor | None:
        if self.selected_voice_id is None:
            return None
        for voice in self.available_voices:
            if voice.id == self.selected_voice_id:
                return voice
        return None

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VoiceDescriptor:
    id: str
    name: str
    language: str
    is_personal: bool = False


@dataclass(frozen=True)
class Utterance:
    text: str
    voice_id: str | None = None
    prefers_assistive_technology_settings: bool = False

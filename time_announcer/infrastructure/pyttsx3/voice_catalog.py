from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

import pyttsx3

from time_announcer.application.errors import VoiceCatalogError
from time_announcer.config import DEFAULT_PERSONAL_VOICE_MARKERS
from time_announcer.domain.vo.voice import VoiceDescriptor


def normalize_language_tag(raw: object) -> str:
    """Turn a driver language value into a tag like "en-US".

    espeak reports bytes with a leading priority byte (b"\\x05en-us"),
    NSSpeechSynthesizer reports "en_US".
    """

    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode("utf-8", errors="ignore")
    else:
        text = str(raw)

    text = "".join(ch for ch in text if ch.isprintable()).strip()
    if not text:
        return ""

    parts = text.replace("_", "-").split("-")
    parts[0] = parts[0].lower()
    if len(parts) > 1 and len(parts[1]) == 2:
        parts[1] = parts[1].upper()
    return "-".join(parts)


class Pyttsx3VoiceCatalog:
    def __init__(
        self,
        *,
        personal_voice_markers: Sequence[str] = DEFAULT_PERSONAL_VOICE_MARKERS,
        engine_factory: Callable[[], Any] = pyttsx3.init,
    ):
        self.personal_voice_markers = tuple(m.lower() for m in personal_voice_markers)
        self._engine_factory = engine_factory

    def list_voices(self) -> list[VoiceDescriptor]:
        try:
            engine = self._engine_factory()
            raw_voices = engine.getProperty("voices")
        except (OSError, RuntimeError, KeyError, ImportError) as e:
            raise VoiceCatalogError(str(e)) from e

        voices: list[VoiceDescriptor] = []
        for raw in raw_voices or ():
            voice_id = getattr(raw, "id", None)
            if not voice_id:
                continue
            name = str(getattr(raw, "name", None) or voice_id)
            voices.append(
                VoiceDescriptor(
                    id=str(voice_id),
                    name=name,
                    language=self._first_language(getattr(raw, "languages", None)),
                    is_personal=self.is_personal(str(voice_id), name),
                )
            )
        return voices

    def is_personal(self, voice_id: str, name: str) -> bool:
        haystack = f"{voice_id} {name}".lower()
        return any(marker in haystack for marker in self.personal_voice_markers)

    @staticmethod
    def _first_language(languages: object) -> str:
        if isinstance(languages, (str, bytes, bytearray)):
            return normalize_language_tag(languages)
        if not isinstance(languages, Iterable):
            return ""
        for item in languages:
            tag = normalize_language_tag(item)
            if tag:
                return tag
        return ""

from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import QLocale, QTime

from time_announcer.domain.vo.voice import VoiceDescriptor

# Some personal voices recorded in US English report this tag.
MISLABELED_PERSONAL_VOICE_TAG = "zh-CH"
MISLABELED_PERSONAL_VOICE_ACTUAL_TAG = "en-US"


def resolve_locale(name: str | None = None) -> QLocale:
    if not name:
        return QLocale.system()
    return QLocale(name.replace("-", "_"))


def format_short_time(value: datetime, locale: QLocale | None = None) -> str:
    """Format the time of day the way the locale writes short times (e.g. "3:00 PM")."""
    locale = locale or QLocale.system()
    return locale.toString(
        QTime(value.hour, value.minute, value.second),
        QLocale.FormatType.ShortFormat,
    )


def language_display_name(voice: VoiceDescriptor) -> str:
    tag = voice.language
    if voice.is_personal and tag == MISLABELED_PERSONAL_VOICE_TAG:
        tag = MISLABELED_PERSONAL_VOICE_ACTUAL_TAG

    return tag_display_name(tag)


def tag_display_name(tag: str) -> str:
    """Map a language tag like "en-US" to "English (United States)".

    Tags Qt does not know are returned unchanged.
    """

    if not tag:
        return tag

    parts = tag.replace("_", "-").split("-")
    locale = QLocale("_".join(parts))
    if locale.language() == QLocale.Language.C:
        return tag

    language = QLocale.languageToString(locale.language())
    has_region = len(parts) > 1 and len(parts[-1]) in (2, 3)
    if not has_region:
        return language
    return f"{language} ({QLocale.territoryToString(locale.territory())})"

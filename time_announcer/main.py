from __future__ import annotations

import sys

from time_announcer.application.errors import VoiceCatalogError
from time_announcer.config import AppConfig
from time_announcer.utils.args import parse_args
from time_announcer.utils.env import load_dotenv


def _list_voices(config: AppConfig) -> int:
    from time_announcer.infrastructure.pyttsx3.voice_catalog import Pyttsx3VoiceCatalog
    from time_announcer.utils.locale import language_display_name

    catalog = Pyttsx3VoiceCatalog(
        personal_voice_markers=config.speech.personal_voice_markers,
    )
    try:
        voices = catalog.list_voices()
    except VoiceCatalogError as exc:
        print(f"Could not list voices: {exc}", file=sys.stderr)
        return 3

    for voice in voices:
        marker = "*" if voice.is_personal else " "
        print(f"{marker} {voice.name} ({language_display_name(voice)})  {voice.id}")
    if not any(voice.is_personal for voice in voices):
        print("No Personal Voices found.", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv(args.env_file)

    try:
        config = AppConfig.from_env()
    except ValueError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    if args.list_voices:
        return _list_voices(config)

    from PySide6.QtWidgets import QApplication

    from time_announcer.di_container import build_container
    from time_announcer.presentation.announcer_bridge import AnnouncerBridge
    from time_announcer.presentation.main_window import MainWindow

    app = QApplication(sys.argv[:1])
    container = build_container(config)

    bridge = AnnouncerBridge(container.controller, container.logger)
    window = MainWindow(bridge)
    window.show()
    bridge.start()

    try:
        return app.exec()
    finally:
        bridge.shutdown()
        close = getattr(container.speech_engine, "close", None)
        if close is not None:
            close()
        container.logger.save()


if __name__ == "__main__":
    raise SystemExit(main())

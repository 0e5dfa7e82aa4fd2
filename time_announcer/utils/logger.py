from __future__ import annotations

from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Callable


class Logger:
    def __init__(
        self,
        *,
        log_dir: Path = Path("logs"),
        on_emit: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.log_dir = log_dir
        self._clock = clock
        self._on_emit: Callable[[str], None] | None = None

        self._lines: list[str] = []
        self._lock = Lock()
        self._started_at = clock()

        # Set via property to keep replay behavior consistent.
        self.on_emit = on_emit

    @property
    def on_emit(self) -> Callable[[str], None] | None:
        return self._on_emit

    @on_emit.setter
    def on_emit(self, callback: Callable[[str], None] | None) -> None:
        # Only replay buffered logs when the first subscriber is attached.
        with self._lock:
            should_replay = self._on_emit is None and callback is not None
            self._on_emit = callback
            backlog = list(self._lines)

        if should_replay:
            for line in backlog:
                callback(line)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def log(self, message: str) -> None:
        if not message:
            return

        line = f"[{self._clock().strftime('%H:%M:%S')}] {message}"
        with self._lock:
            self._lines.append(line)
            callback = self._on_emit

        if callback:
            callback(line)

    def save(self) -> Path | None:
        lines = self.lines
        if not lines:
            return None

        self.log_dir.mkdir(parents=True, exist_ok=True)

        filename = self._started_at.strftime("%Y-%m-%d_%H-%M-%S.txt")
        path = self.log_dir / filename

        path.write_text("\n".join(lines), encoding="utf-8")
        return path

from __future__ import annotations

from collections.abc import Callable
from queue import Empty, Full, Queue
from threading import Event, Lock, Thread
from typing import Any, NamedTuple

import pyttsx3

from time_announcer.application.errors import SpeechEngineError
from time_announcer.domain.vo.voice import Utterance
from time_announcer.utils.logger import Logger


class _QueuedUtterance(NamedTuple):
    generation: int
    utterance: Utterance


class Pyttsx3SpeechEngine:
    """Speaks utterances one at a time on a dedicated worker thread.

    The pyttsx3 engine is created and driven only by the worker thread.
    `stop_speaking` bumps a generation counter: queued utterances from an
    older generation are dropped and the running one is stopped at its next
    word boundary.
    """

    def __init__(
        self,
        *,
        rate: int | None = None,
        volume: float | None = None,
        logger: Logger | None = None,
        engine_factory: Callable[[], Any] = pyttsx3.init,
        max_queue: int = 8,
    ):
        self.rate = rate
        self.volume = volume
        self.logger = logger
        self._engine_factory = engine_factory

        self._queue: Queue[_QueuedUtterance | None] = Queue(maxsize=max_queue)
        self._lock = Lock()
        self._generation = 0
        self._current_generation: int | None = None
        self._worker_thread: Thread | None = None
        self.is_speaking_event = Event()

    @property
    def is_speaking(self) -> bool:
        return self.is_speaking_event.is_set()

    def speak(self, utterance: Utterance) -> None:
        if not utterance.text.strip():
            return

        self._ensure_worker_started()
        with self._lock:
            item = _QueuedUtterance(self._generation, utterance)
        try:
            self._queue.put_nowait(item)
        except Full as e:
            raise SpeechEngineError("Speech queue is full.") from e

    def stop_speaking(self) -> None:
        with self._lock:
            self._generation += 1
        self._drain_queue()

    def close(self) -> None:
        self.stop_speaking()
        thread = self._worker_thread
        if thread is None or not thread.is_alive():
            return
        self._queue.put(None)
        thread.join(timeout=3)
        self._worker_thread = None

    def _ensure_worker_started(self) -> None:
        if self._worker_thread and self._worker_thread.is_alive():
            return
        self._worker_thread = Thread(target=self._worker_loop, daemon=True)
        self._worker_thread.start()

    def _drain_queue(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                return
            if item is None:
                # Keep the shutdown marker.
                self._queue.put_nowait(None)
                return

    def _is_stale(self, generation: int) -> bool:
        with self._lock:
            return generation != self._generation

    def _worker_loop(self) -> None:
        try:
            engine = self._engine_factory()
        except (OSError, RuntimeError, KeyError, ImportError) as e:
            self._log(f"Speech engine failed to start: {e}")
            return

        def on_word(name: Any, location: int, length: int) -> None:
            current = self._current_generation
            if current is not None and self._is_stale(current):
                engine.stop()

        engine.connect("started-word", on_word)

        while True:
            item = self._queue.get()
            if item is None:
                return
            if self._is_stale(item.generation):
                continue

            self._current_generation = item.generation
            self.is_speaking_event.set()
            try:
                self._configure(engine, item.utterance)
                engine.say(item.utterance.text)
                engine.runAndWait()
            except (OSError, RuntimeError, KeyError, ValueError) as e:
                self._log(f"Error while speaking: {e}")
            finally:
                self._current_generation = None
                self.is_speaking_event.clear()

    def _configure(self, engine: Any, utterance: Utterance) -> None:
        if utterance.voice_id is not None:
            engine.setProperty("voice", utterance.voice_id)

        # The configured rate and volume are the user's assistive-technology
        # settings; other utterances keep the driver defaults.
        if not utterance.prefers_assistive_technology_settings:
            return
        if self.rate is not None:
            engine.setProperty("rate", self.rate)
        if self.volume is not None:
            engine.setProperty("volume", max(0.0, min(1.0, self.volume)))

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)

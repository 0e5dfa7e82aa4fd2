"""Unit tests for Pyttsx3SpeechEngine."""
from __future__ import annotations

import unittest
from threading import Event
from unittest.mock import MagicMock

from time_announcer.application.errors import SpeechEngineError
from time_announcer.domain.vo.voice import Utterance
from time_announcer.infrastructure.pyttsx3.speech_engine import Pyttsx3SpeechEngine


class FakeDriverEngine:
    """Stands in for a pyttsx3 engine; the first utterance can be held open."""

    def __init__(self):
        self.properties: list[tuple[str, object]] = []
        self.spoken: list[str] = []
        self.pending: list[str] = []
        self.hold_first = Event()
        self.hold_first.set()
        self.first_started = Event()
        self.spoke = Event()
        self.stopped = 0

    def connect(self, topic, callback):
        self.callback = callback

    def setProperty(self, name, value):
        self.properties.append((name, value))

    def say(self, text):
        self.pending.append(text)

    def runAndWait(self):
        text = self.pending.pop(0)
        if not self.spoken:
            self.first_started.set()
            self.hold_first.wait(timeout=5)
        self.spoken.append(text)
        self.spoke.set()

    def stop(self):
        self.stopped += 1


class TestPyttsx3SpeechEngine(unittest.TestCase):
    """Test cases for Pyttsx3SpeechEngine."""

    def setUp(self):
        """Set up test fixtures."""
        self.driver = FakeDriverEngine()
        self.engine = Pyttsx3SpeechEngine(
            rate=150,
            volume=0.5,
            engine_factory=lambda: self.driver,
        )

    def tearDown(self):
        self.driver.hold_first.set()
        self.engine.close()

    def _wait_for(self, count: int) -> None:
        for _ in range(100):
            if len(self.driver.spoken) >= count:
                return
            self.driver.spoke.wait(timeout=0.05)
            self.driver.spoke.clear()
        self.fail(f"expected {count} utterances, got {self.driver.spoken}")

    def test_speak_applies_voice_and_assistive_settings(self):
        """Test that the selected voice and configured rate/volume are applied."""
        self.engine.speak(
            Utterance(
                text="The time is 3:00 PM",
                voice_id="pv.a",
                prefers_assistive_technology_settings=True,
            )
        )
        self._wait_for(1)

        self.assertEqual(self.driver.spoken, ["The time is 3:00 PM"])
        self.assertIn(("voice", "pv.a"), self.driver.properties)
        self.assertIn(("rate", 150), self.driver.properties)
        self.assertIn(("volume", 0.5), self.driver.properties)

    def test_plain_utterance_keeps_driver_defaults(self):
        """Test that rate/volume are untouched without the assistive preference."""
        self.engine.speak(Utterance(text="hello"))
        self._wait_for(1)

        self.assertEqual(self.driver.properties, [])

    def test_blank_text_is_ignored(self):
        """Test that whitespace-only utterances are not queued."""
        self.engine.speak(Utterance(text="   "))
        self.assertIsNone(self.engine._worker_thread)

    def test_stop_speaking_drops_queued_utterances(self):
        """Test that stop discards pending speech but later speech still plays."""
        self.driver.hold_first.clear()
        self.engine.speak(Utterance(text="first"))
        self.assertTrue(self.driver.first_started.wait(timeout=5))

        self.engine.speak(Utterance(text="dropped"))
        self.engine.stop_speaking()
        self.engine.speak(Utterance(text="after stop"))
        self.driver.hold_first.set()

        self._wait_for(2)
        self.assertEqual(self.driver.spoken, ["first", "after stop"])

    def test_word_callback_stops_stale_utterance(self):
        """Test that the running utterance is cut at the next word after stop."""
        self.driver.hold_first.clear()
        self.engine.speak(Utterance(text="first"))
        self.assertTrue(self.driver.first_started.wait(timeout=5))

        self.engine.stop_speaking()
        self.driver.callback("first", 0, 5)

        self.assertEqual(self.driver.stopped, 1)

    def test_full_queue_raises(self):
        """Test that a saturated queue is reported as a speech error."""
        self.driver.hold_first.clear()
        engine = Pyttsx3SpeechEngine(engine_factory=lambda: self.driver, max_queue=1)
        try:
            engine.speak(Utterance(text="first"))
            self.assertTrue(self.driver.first_started.wait(timeout=5))
            engine.speak(Utterance(text="queued"))
            with self.assertRaises(SpeechEngineError):
                engine.speak(Utterance(text="overflow"))
        finally:
            self.driver.hold_first.set()
            engine.close()

    def test_driver_start_failure_is_logged(self):
        """Test that a driver that cannot start is logged, not raised."""
        logger = MagicMock()
        engine = Pyttsx3SpeechEngine(
            engine_factory=MagicMock(side_effect=RuntimeError("no driver")),
            logger=logger,
        )
        engine.speak(Utterance(text="hello"))
        engine._worker_thread.join(timeout=5)

        logger.log.assert_called_once()
        self.assertIn("no driver", logger.log.call_args.args[0])


if __name__ == "__main__":
    unittest.main()

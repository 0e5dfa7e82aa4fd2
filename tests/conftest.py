"""Shared test setup: Qt widgets render offscreen so tests run headless."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

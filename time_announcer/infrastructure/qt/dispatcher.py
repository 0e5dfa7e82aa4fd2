from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, Qt, Signal


class QtDispatcher(QObject):
    """Runs callables on the thread that owns this object.

    Create it on the GUI thread; `dispatch` may then be called from any
    thread and the callable is queued onto the GUI event loop.
    """

    _invoke = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def dispatch(self, fn: Callable[[], None]) -> None:
        self._invoke.emit(fn)

    def _run(self, fn: Callable[[], None]) -> None:
        fn()

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QLabel,
    QMainWindow,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from time_announcer.domain.vo.announcement_session import AnnouncementSession
from time_announcer.domain.vo.authorization_state import AuthorizationState
from time_announcer.presentation.announcer_bridge import AnnouncerBridge
from time_announcer.utils.locale import language_display_name

PENDING_MESSAGE = "Requesting Personal Voice authorization..."
DENIED_MESSAGE = (
    "Personal Voice authorization has been denied. "
    "Please enable it in your system's accessibility settings."
)
UNSUPPORTED_MESSAGE = (
    "Personal Voice is not supported on this device or operating system version."
)
NO_VOICES_MESSAGE = (
    "No Personal Voices found. "
    "Please create one in your system's accessibility settings."
)
START_LABEL = "Start Saying The Time"
STOP_LABEL = "Stop"


def describe_session(session: AnnouncementSession) -> str | None:
    """Return the explanatory text for the session, or None when the voice picker is shown."""
    state = session.authorization_state
    if state is AuthorizationState.UNKNOWN:
        return PENDING_MESSAGE
    if state is AuthorizationState.DENIED:
        return DENIED_MESSAGE
    if state is AuthorizationState.UNSUPPORTED:
        return UNSUPPORTED_MESSAGE
    if not session.available_voices:
        return NO_VOICES_MESSAGE
    return None


def toggle_label(session: AnnouncementSession) -> str:
    return STOP_LABEL if session.is_active else START_LABEL


class MainWindow(QMainWindow):
    def __init__(self, bridge: AnnouncerBridge):
        super().__init__()
        self.bridge = bridge
        self._voice_ids: tuple[str, ...] = ()

        self.setWindowTitle("Time Announcer")
        self.resize(420, 480)

        self.status_label = QLabel()
        self.status_label.setWordWrap(True)
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.picker_label = QLabel("Select a Personal Voice")
        self.voice_picker = QComboBox()
        self.voice_picker.currentIndexChanged.connect(self.on_voice_picked)

        self.toggle_button = QPushButton(START_LABEL)
        self.toggle_button.clicked.connect(self.bridge.toggle)

        self.log_view = QTextEdit()
        self.log_view.setReadOnly(True)

        layout = QVBoxLayout()
        layout.addStretch(1)
        layout.addWidget(self.status_label)
        layout.addWidget(self.picker_label)
        layout.addWidget(self.voice_picker)
        layout.addStretch(1)
        layout.addWidget(self.toggle_button)
        layout.addWidget(self.log_view)

        central = QWidget()
        central.setLayout(layout)
        self.setCentralWidget(central)

        self.bridge.log.connect(self.append_log)
        self.bridge.session_changed.connect(self.render_session)
        self.render_session(self.bridge.session)

    def render_session(self, session: AnnouncementSession) -> None:
        message = describe_session(session)
        self.status_label.setText(message or "")
        self.status_label.setVisible(message is not None)

        show_picker = message is None
        self.picker_label.setVisible(show_picker)
        self.voice_picker.setVisible(show_picker)
        if show_picker:
            self._render_voices(session)

        self.toggle_button.setText(toggle_label(session))
        self.toggle_button.setEnabled(session.can_toggle)

    def _render_voices(self, session: AnnouncementSession) -> None:
        voice_ids = tuple(voice.id for voice in session.available_voices)
        self.voice_picker.blockSignals(True)
        try:
            if voice_ids != self._voice_ids:
                self.voice_picker.clear()
                for voice in session.available_voices:
                    self.voice_picker.addItem(
                        f"{voice.name} ({language_display_name(voice)})",
                        voice.id,
                    )
                self._voice_ids = voice_ids
            index = self.voice_picker.findData(session.selected_voice_id)
            self.voice_picker.setCurrentIndex(index)
        finally:
            self.voice_picker.blockSignals(False)

    def on_voice_picked(self, index: int) -> None:
        if index < 0:
            return
        self.bridge.select_voice(self.voice_picker.itemData(index))

    def append_log(self, text: str) -> None:
        self.log_view.append(text)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.bridge.shutdown()
        super().closeEvent(event)

from PySide6.QtCore import QObject, Signal

from time_announcer.application.announcement_controller import AnnouncementController
from time_announcer.domain.vo.announcement_session import AnnouncementSession
from time_announcer.utils.logger import Logger


class AnnouncerBridge(QObject):
    log = Signal(str)
    session_changed = Signal(object)

    def __init__(self, controller: AnnouncementController, logger: Logger):
        super().__init__()
        self.controller = controller

        # Logger lines can come from speech/authorization threads; signals
        # queue them onto the GUI thread.
        logger.on_emit = self.log.emit
        self._unsubscribe = self.controller.subscribe(self.session_changed.emit)

    @property
    def session(self) -> AnnouncementSession:
        return self.controller.session

    def start(self) -> None:
        self.controller.request_authorization()

    def toggle(self) -> None:
        self.controller.toggle()

    def select_voice(self, voice_id: str | None) -> None:
        self.controller.select_voice(voice_id)

    def shutdown(self) -> None:
        self._unsubscribe()
        self.controller.shutdown()

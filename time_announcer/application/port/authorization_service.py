from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

from time_announcer.domain.vo.authorization_state import AuthorizationState


class AuthorizationService(Protocol):
    def request_authorization(self) -> Future[AuthorizationState]:
        """Start the personal voice authorization check.

        The returned future resolves exactly once, possibly on another thread.
        """
        ...

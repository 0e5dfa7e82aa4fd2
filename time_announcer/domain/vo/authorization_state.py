from __future__ import annotations

from enum import Enum


class AuthorizationState(Enum):
    UNKNOWN = "unknown"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"
    AUTHORIZED = "authorized"

    @property
    def is_terminal(self) -> bool:
        return self is not AuthorizationState.UNKNOWN

from __future__ import annotations


class ExternalServiceError(RuntimeError):
    """Raised when a platform speech service call fails (driver-agnostic)."""


class SpeechEngineError(ExternalServiceError):
    """Raised when an utterance cannot be submitted or spoken."""


class VoiceCatalogError(ExternalServiceError):
    """Raised when installed voices cannot be enumerated."""


class AuthorizationError(ExternalServiceError):
    """Raised when the personal voice authorization check itself fails."""


class SchedulingError(ValueError):
    """Raised when the next announcement instant cannot be computed."""

"""Error taxonomy for recognition sessions."""
from __future__ import annotations

from datetime import datetime
from typing import Optional


class ReadingFluencyError(Exception):
    """Base exception for reading session errors."""
    def __init__(self, message: str, stage: str = "unknown", cause: Optional[Exception] = None):
        super().__init__(message)
        self.stage = stage
        self.cause = cause
        self.timestamp = datetime.now()


class RecognitionError(ReadingFluencyError):
    """An error reported by the speech recognition engine."""
    fatal = False

    def __init__(self, kind: str, message: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message or kind, stage="recognition", cause=cause)
        self.kind = kind


class EngineFatalError(RecognitionError):
    """Permission or capture device errors. The session stops, no restart."""
    fatal = True


class EngineTransientError(RecognitionError):
    """Any other engine error. Listening continues through auto-restart."""


class EngineUnavailableError(EngineFatalError):
    """No recognition engine is available on this platform."""
    def __init__(self, message: str = "Speech recognition engine is not available"):
        super().__init__("unsupported", message)


class InvalidEventError(ReadingFluencyError):
    """An inbound engine event payload failed validation."""
    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message, stage="ingestion", cause=cause)


class InvalidSessionStateError(ReadingFluencyError):
    """A lifecycle operation was called in a state that does not allow it."""
    def __init__(self, message: str):
        super().__init__(message, stage="lifecycle")

"""Recognition session control: engine events, restarts and error taxonomy."""
from .controller import (
    RecognitionEngine,
    RecognitionSessionController,
    SessionConfig,
    SessionState,
    SpeechDebugEvent,
    restart_delay_ms,
)
from .errors import (
    EngineFatalError,
    EngineTransientError,
    EngineUnavailableError,
    InvalidEventError,
    InvalidSessionStateError,
    ReadingFluencyError,
    RecognitionError,
)
from .events import EndEvent, ErrorEvent, RecognitionEvent, ResultEntry, ResultEvent, parse_event
from .scheduler import ManualScheduler, ScheduledCall, ThreadingScheduler

__all__ = [
    "RecognitionEngine",
    "RecognitionSessionController",
    "SessionConfig",
    "SessionState",
    "SpeechDebugEvent",
    "restart_delay_ms",
    "EngineFatalError",
    "EngineTransientError",
    "EngineUnavailableError",
    "InvalidEventError",
    "InvalidSessionStateError",
    "ReadingFluencyError",
    "RecognitionError",
    "EndEvent",
    "ErrorEvent",
    "RecognitionEvent",
    "ResultEntry",
    "ResultEvent",
    "parse_event",
    "ManualScheduler",
    "ScheduledCall",
    "ThreadingScheduler",
]

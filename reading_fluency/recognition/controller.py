"""Recognition session lifecycle: listening, auto-restart and the running transcript."""
from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Deque, Iterable, List, Mapping, Optional, Protocol, Union

from ..models.session_result import SessionResult
from ..scorer.session_scorer import score_timed_session
from ..transcript.rules import (
    DEBUG_EVENT_CAPACITY,
    RESTART_BASE_DELAY_MS,
    RESTART_MAX_DELAY_MS,
)
from ..transcript.state import TranscriptState
from .errors import (
    EngineFatalError,
    EngineTransientError,
    EngineUnavailableError,
    InvalidSessionStateError,
    RecognitionError,
)
from .events import EndEvent, ErrorEvent, ResultEvent, parse_event
from .scheduler import ThreadingScheduler

logger = logging.getLogger(__name__)


class RecognitionEngine(Protocol):
    """The speech recognition collaborator. It reports back through ``dispatch``.

    ``start`` receives the BCP 47 language tag to recognize, e.g. "es-ES".
    """

    def start(self, lang: str) -> None: ...

    def stop(self) -> None: ...


class SessionState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    RESTARTING = "restarting"


@dataclass(frozen=True)
class SessionConfig:
    """Settings for one recognition session.

    Attributes:
        lang: Recognition language requested from the engine
        debug: Keep a ring buffer of recent result events
        restart_base_delay_ms: Backoff step between restarts
        restart_max_delay_ms: Backoff ceiling
        debug_capacity: Number of debug events kept
        strip_accents: Accent handling when scoring the transcript
    """
    lang: str = "es-ES"
    debug: bool = False
    restart_base_delay_ms: int = RESTART_BASE_DELAY_MS
    restart_max_delay_ms: int = RESTART_MAX_DELAY_MS
    debug_capacity: int = DEBUG_EVENT_CAPACITY
    strip_accents: bool = True


@dataclass(frozen=True)
class SpeechDebugEvent:
    timestamp: str
    result_index: int
    final_chunk: str
    interim_chunk: str
    combined_transcript: str
    results_length: int


def restart_delay_ms(
    attempt: int,
    base_ms: int = RESTART_BASE_DELAY_MS,
    max_ms: int = RESTART_MAX_DELAY_MS,
) -> int:
    """Linear backoff: 150, 300, 450, ... capped at 1600 ms."""
    return min(max_ms, base_ms * (attempt + 1))


class RecognitionSessionController:
    """Owns one reading session's listening state and transcript.

    The engine delivers events through ``dispatch`` (or ``feed``); each event
    is processed to completion under a lock before the next one. Final chunks
    are merged into the stable transcript in arrival order, interim chunks
    only ever replace the previous interim text.

    Usage:
        controller = RecognitionSessionController(engine)
        controller.start()
        # engine callbacks:
        controller.dispatch({"type": "result", "result_index": 0,
                             "results": [{"transcript": "hola", "is_final": True}]})
        controller.dispatch({"type": "end"})   # schedules a restart
        result = controller.stop_and_score(passage, started_at, ended_at)
    """

    def __init__(
        self,
        engine: Optional[RecognitionEngine],
        config: Optional[SessionConfig] = None,
        scheduler: Any = None,
        on_update: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[RecognitionError], None]] = None,
    ):
        self.engine = engine
        self.config = config or SessionConfig()
        self.scheduler = scheduler or ThreadingScheduler()
        self.on_update = on_update
        self.on_error = on_error

        self._lock = threading.RLock()
        self._transcript = TranscriptState()
        self._state = SessionState.IDLE
        self._keep_listening = False
        self._restart_attempts = 0
        self._restart_handle: Any = None
        self._restart_generation = 0
        self._error: Optional[RecognitionError] = None
        self._debug_events: Deque[SpeechDebugEvent] = deque(maxlen=self.config.debug_capacity)

    # ------------------------------------------------------------------
    # Exposed state
    # ------------------------------------------------------------------
    @property
    def supported(self) -> bool:
        return self.engine is not None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def listening(self) -> bool:
        return self._state is not SessionState.IDLE

    @property
    def combined_text(self) -> str:
        return self._transcript.combined_text

    @property
    def final_text(self) -> str:
        return self._transcript.stable_text

    @property
    def interim_text(self) -> str:
        return self._transcript.interim_text

    @property
    def error(self) -> Optional[RecognitionError]:
        return self._error

    @property
    def last_error(self) -> Optional[str]:
        return self._error.kind if self._error else None

    @property
    def restart_attempts(self) -> int:
        return self._restart_attempts

    @property
    def pending_restart(self) -> bool:
        return self._restart_handle is not None

    @property
    def debug_events(self) -> List[SpeechDebugEvent]:
        return list(self._debug_events)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Begin listening. Restarts are scheduled until ``stop`` is called."""
        with self._lock:
            if self.engine is None:
                self._error = EngineUnavailableError()
                logger.error("Cannot start session: %s", self._error)
                self._notify_error(self._error)
                return

            self._keep_listening = True
            self._cancel_restart()
            self._restart_attempts = 0
            self._error = None
            self._state = SessionState.LISTENING
            logger.info("Recognition session started (lang=%s)", self.config.lang)
            try:
                self.engine.start(self.config.lang)
            except Exception:
                # engine not ready yet; the next end/error event drives recovery
                logger.warning("Engine start failed, waiting for engine events", exc_info=True)

    def stop(self) -> None:
        """Stop listening. Safe in any state; a pending restart never fires afterwards."""
        with self._lock:
            self._keep_listening = False
            self._cancel_restart()
            self._restart_attempts = 0
            was = self._state
            self._state = SessionState.IDLE
            if self.engine is not None:
                self.engine.stop()
            logger.info("Recognition session stopped (was %s)", was.value)

    def reset(self) -> None:
        """Clear transcript, error and debug log before a new session."""
        with self._lock:
            if self._state is not SessionState.IDLE:
                raise InvalidSessionStateError(f"reset() requires an idle session, state is {self._state.value}")
            self._cancel_restart()
            self._restart_attempts = 0
            self._transcript.clear()
            self._error = None
            self._debug_events.clear()

    def stop_and_score(
        self,
        reference_text: str,
        started_at: datetime,
        ended_at: Optional[datetime] = None,
    ) -> SessionResult:
        """Stop the session and score the combined transcript against the passage."""
        self.stop()
        ended_at = ended_at or datetime.now(timezone.utc)
        return score_timed_session(
            reference_text,
            self.combined_text,
            started_at,
            ended_at,
            strip_accents=self.config.strip_accents,
        )

    # ------------------------------------------------------------------
    # Engine events
    # ------------------------------------------------------------------
    def dispatch(self, event: Union[Mapping[str, Any], ResultEvent, ErrorEvent, EndEvent]) -> None:
        """Validate one engine event and apply it."""
        parsed = parse_event(event)
        with self._lock:
            if isinstance(parsed, ResultEvent):
                self._handle_result(parsed)
            elif isinstance(parsed, ErrorEvent):
                self._handle_error(parsed)
            elif isinstance(parsed, EndEvent):
                self._handle_end()

    def feed(self, events: Iterable[Union[Mapping[str, Any], ResultEvent, ErrorEvent, EndEvent]]) -> None:
        for event in events:
            self.dispatch(event)

    def _handle_result(self, event: ResultEvent) -> None:
        final_chunk, interim_chunk = event.split_chunks()

        self._transcript.apply_final(final_chunk)
        self._transcript.replace_interim(interim_chunk)
        combined = self._transcript.refresh_combined()
        self._restart_attempts = 0
        if self._state is SessionState.RESTARTING:
            self._state = SessionState.LISTENING

        if self.config.debug:
            self._debug_events.append(
                SpeechDebugEvent(
                    timestamp=datetime.now(timezone.utc).isoformat(),
                    result_index=event.result_index,
                    final_chunk=final_chunk,
                    interim_chunk=interim_chunk,
                    combined_transcript=combined,
                    results_length=len(event.results),
                )
            )
        if self.on_update is not None:
            self.on_update(combined)

    def _handle_error(self, event: ErrorEvent) -> None:
        if event.fatal:
            self._error = EngineFatalError(event.error, event.message)
            self._keep_listening = False
            self._cancel_restart()
            self._state = SessionState.IDLE
            logger.error("Recognition stopped by engine error: %s", event.error)
        else:
            self._error = EngineTransientError(event.error, event.message)
            logger.warning("Recognition engine error (will restart on end): %s", event.error)
        self._notify_error(self._error)

    def _handle_end(self) -> None:
        if not self._keep_listening:
            self._state = SessionState.IDLE
            logger.debug("Engine ended, session idle")
            return

        self._cancel_restart()
        delay = restart_delay_ms(
            self._restart_attempts,
            self.config.restart_base_delay_ms,
            self.config.restart_max_delay_ms,
        )
        self._restart_attempts += 1
        self._state = SessionState.RESTARTING
        logger.debug("Engine ended, restart #%d in %d ms", self._restart_attempts, delay)
        generation = self._restart_generation
        self._restart_handle = self.scheduler.call_later(delay, lambda: self._fire_restart(generation))

    def _fire_restart(self, generation: int) -> None:
        with self._lock:
            # a timer that lost the race with cancel() must not restart
            if generation != self._restart_generation or not self._keep_listening:
                return
            self._restart_handle = None
            if self.engine is None:
                return
            try:
                self.engine.start(self.config.lang)
            except Exception:
                logger.warning("Engine restart failed, waiting for next end/error", exc_info=True)
                return
            self._state = SessionState.LISTENING

    def _cancel_restart(self) -> None:
        self._restart_generation += 1
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    def _notify_error(self, error: RecognitionError) -> None:
        if self.on_error is not None:
            self.on_error(error)

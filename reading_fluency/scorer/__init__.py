"""Session scoring: reading speed, accuracy and persistence payloads."""
from .metrics import (
    MIN_VALID_DURATION_SECONDS,
    calculate_wpm,
    count_words,
    duration_between,
    is_invalid_short,
)
from .session_scorer import (
    build_submission,
    generate_session_report,
    score_session,
    score_timed_session,
    transcript_snippet,
)

__all__ = [
    "MIN_VALID_DURATION_SECONDS",
    "calculate_wpm",
    "count_words",
    "duration_between",
    "is_invalid_short",
    "build_submission",
    "generate_session_report",
    "score_session",
    "score_timed_session",
    "transcript_snippet",
]

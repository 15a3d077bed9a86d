"""Oral reading transcript reconciliation and scoring."""
from .alignment import align, compare_for_highlight, normalize_text, tokenize_words
from .models import AlignmentResult, ComparedToken, SessionResult, SessionSubmission
from .recognition import RecognitionSessionController, SessionConfig, SessionState, parse_event
from .scorer import calculate_wpm, generate_session_report, score_session, score_timed_session
from .transcript import TranscriptState, collapse_runaway_repeats, merge_transcripts

__version__ = "0.1.0"

__all__ = [
    "align",
    "compare_for_highlight",
    "normalize_text",
    "tokenize_words",
    "AlignmentResult",
    "ComparedToken",
    "SessionResult",
    "SessionSubmission",
    "RecognitionSessionController",
    "SessionConfig",
    "SessionState",
    "parse_event",
    "calculate_wpm",
    "generate_session_report",
    "score_session",
    "score_timed_session",
    "TranscriptState",
    "collapse_runaway_repeats",
    "merge_transcripts",
]

"""Data models for alignment and session scoring."""
from .alignment_result import AlignmentResult, ComparedToken
from .session_result import TRANSCRIPT_SNIPPET_MAX_CHARS, SessionResult, SessionSubmission

__all__ = [
    "AlignmentResult",
    "ComparedToken",
    "SessionResult",
    "SessionSubmission",
    "TRANSCRIPT_SNIPPET_MAX_CHARS",
]

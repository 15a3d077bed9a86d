"""Session scoring: combines timing, word count and alignment accuracy."""
from __future__ import annotations

import logging
import math
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional

from ..alignment.aligner import align, compare_for_highlight
from ..models.session_result import TRANSCRIPT_SNIPPET_MAX_CHARS, SessionResult, SessionSubmission
from .metrics import calculate_wpm, count_words, duration_between, is_invalid_short

logger = logging.getLogger(__name__)


def score_session(
    reference_text: Optional[str],
    transcript: Optional[str],
    duration_seconds: float,
    *,
    strip_accents: bool = True,
) -> SessionResult:
    """Score a finished reading session.

    Args:
        reference_text: The passage shown to the student
        transcript: Full combined transcript (never the stored snippet)
        duration_seconds: Reading time, floored to whole seconds
        strip_accents: Accent handling for word counting and alignment

    Returns:
        SessionResult with wpm, accuracy percentage and validity flag
    """
    seconds = max(0, math.floor(duration_seconds))
    word_count = count_words(transcript, strip_accents=strip_accents)
    alignment = align(reference_text, transcript, strip_accents=strip_accents)
    result = SessionResult(
        wpm=calculate_wpm(word_count, seconds),
        accuracy_percent=alignment.accuracy_percent,
        duration_seconds=seconds,
        invalid_short=is_invalid_short(seconds),
        word_count_read=word_count,
    )
    logger.info(
        "Session scored: %d words in %ds, wpm=%.2f accuracy=%.1f%%%s",
        word_count,
        result.duration_seconds,
        result.wpm,
        result.accuracy_percent,
        " (short)" if result.invalid_short else "",
    )
    return result


def score_timed_session(
    reference_text: Optional[str],
    transcript: Optional[str],
    started_at: datetime,
    ended_at: datetime,
    *,
    strip_accents: bool = True,
) -> SessionResult:
    """Same as score_session but takes the start/end instants of the reading."""
    return score_session(
        reference_text,
        transcript,
        duration_between(started_at, ended_at),
        strip_accents=strip_accents,
    )


def transcript_snippet(transcript: Optional[str]) -> Optional[str]:
    if not transcript:
        return None
    return transcript[:TRANSCRIPT_SNIPPET_MAX_CHARS]


def build_submission(
    result: SessionResult,
    transcript: Optional[str],
    started_at: datetime,
    ended_at: datetime,
) -> SessionSubmission:
    """Payload for the persistence collaborator."""
    return SessionSubmission(
        started_at=started_at,
        ended_at=ended_at,
        duration_seconds=max(1, result.duration_seconds),
        word_count_read=result.word_count_read,
        wpm=result.wpm,
        accuracy=result.accuracy_percent,
        invalid_short=result.invalid_short,
        transcript_snippet=transcript_snippet(transcript),
    )


def generate_session_report(
    reference_text: Optional[str],
    transcript: Optional[str],
    started_at: datetime,
    ended_at: datetime,
    *,
    strip_accents: bool = True,
) -> Dict[str, Any]:
    """Full report for a finished session.

    Returns:
        Dict with:
            - "summary": SessionResult fields
            - "words": List of {raw, is_word, missed} for the reference passage
            - "submission": SessionSubmission payload (JSON-ready)
    """
    result = score_timed_session(reference_text, transcript, started_at, ended_at, strip_accents=strip_accents)
    tokens = compare_for_highlight(reference_text, transcript, strip_accents=strip_accents)
    submission = build_submission(result, transcript, started_at, ended_at)
    return {
        "summary": result.model_dump(),
        "words": [asdict(t) for t in tokens],
        "submission": submission.model_dump(mode="json"),
    }

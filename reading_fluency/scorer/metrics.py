"""Reading speed and session validity metrics."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from ..alignment.normalizer import tokenize_words

# Sessions shorter than this are flagged for review
MIN_VALID_DURATION_SECONDS = 10


def calculate_wpm(word_count: int, duration_seconds: float) -> float:
    """Words per minute rounded to 2 decimals, 0.0 for a non-positive duration.

    Example: calculate_wpm(120, 60) -> 120.0
    """
    if duration_seconds <= 0:
        return 0.0
    return round(word_count / (duration_seconds / 60), 2)


def is_invalid_short(duration_seconds: float) -> bool:
    return duration_seconds < MIN_VALID_DURATION_SECONDS


def count_words(transcript: Optional[str], strip_accents: bool = True) -> int:
    """Number of normalized words actually read."""
    return len(tokenize_words(transcript, strip_accents=strip_accents))


def duration_between(started_at: datetime, ended_at: datetime) -> int:
    """Whole seconds elapsed between two instants, never less than 1."""
    elapsed = (ended_at - started_at).total_seconds()
    return max(1, math.floor(elapsed))

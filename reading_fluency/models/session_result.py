"""Data models handed to the persistence boundary after a reading session."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TRANSCRIPT_SNIPPET_MAX_CHARS = 250


class SessionResult(BaseModel):
    """Score of one finished reading session."""
    model_config = ConfigDict(frozen=True)

    wpm: float = Field(ge=0)
    accuracy_percent: float = Field(ge=0, le=100)
    duration_seconds: int = Field(ge=0)
    invalid_short: bool
    word_count_read: int = Field(default=0, ge=0)


class SessionSubmission(BaseModel):
    """Payload stored for a finished session.

    The transcript snippet is a display aid only; accuracy is always computed
    on the full transcript before the snippet is cut.
    """
    model_config = ConfigDict(frozen=True)

    started_at: datetime
    ended_at: datetime
    duration_seconds: int = Field(gt=0)
    word_count_read: int = Field(ge=0)
    wpm: float = Field(ge=0)
    accuracy: float = Field(ge=0, le=100)
    invalid_short: bool
    transcript_snippet: Optional[str] = Field(default=None, max_length=TRANSCRIPT_SNIPPET_MAX_CHARS)

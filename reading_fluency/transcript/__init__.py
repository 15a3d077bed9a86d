"""Incremental transcript reconciliation: merging final chunks and collapsing glitches."""
from .collapse import collapse_runaway_repeats, repeat_key
from .merge import common_prefix_length, merge_transcripts
from .state import TranscriptState
from .rules import (
    RUNAWAY_THRESHOLD,
    MAX_CONSECUTIVE_REPEATS,
    MAX_HEAD_SKIP,
    REPLAY_MIN_WORDS,
    REPLAY_CANDIDATE_COVERAGE,
    REPLAY_PREVIOUS_COVERAGE,
    RESTART_BASE_DELAY_MS,
    RESTART_MAX_DELAY_MS,
    FATAL_ERROR_KINDS,
    DEBUG_EVENT_CAPACITY,
)

__all__ = [
    "collapse_runaway_repeats",
    "repeat_key",
    "common_prefix_length",
    "merge_transcripts",
    "TranscriptState",
    "RUNAWAY_THRESHOLD",
    "MAX_CONSECUTIVE_REPEATS",
    "MAX_HEAD_SKIP",
    "REPLAY_MIN_WORDS",
    "REPLAY_CANDIDATE_COVERAGE",
    "REPLAY_PREVIOUS_COVERAGE",
    "RESTART_BASE_DELAY_MS",
    "RESTART_MAX_DELAY_MS",
    "FATAL_ERROR_KINDS",
    "DEBUG_EVENT_CAPACITY",
]

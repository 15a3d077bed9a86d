"""Thresholds for transcript reconciliation and recognition restarts."""
from __future__ import annotations

# Runaway repeats: a run of the same token at least this long is an engine
# artifact and gets cut down to MAX_CONSECUTIVE_REPEATS tokens
RUNAWAY_THRESHOLD = 6
MAX_CONSECUTIVE_REPEATS = 3

# Letters kept when comparing raw tokens for repeat runs
REPEAT_TOKEN_LETTERS = "áéíóúüñ"

# Stray tokens some mobile engines prepend before replaying a chunk
MAX_HEAD_SKIP = 3

# Replay detection: both sides need this many words before a shared prefix
# is treated as a replay of the session start
REPLAY_MIN_WORDS = 12
REPLAY_CANDIDATE_COVERAGE = 0.8  # shared prefix / incoming words
REPLAY_PREVIOUS_COVERAGE = 0.6   # shared prefix / previous words

# Auto-restart backoff: min(cap, base * (attempt + 1))
RESTART_BASE_DELAY_MS = 150
RESTART_MAX_DELAY_MS = 1600

# Engine errors that end the session instead of triggering a restart
FATAL_ERROR_KINDS = frozenset({"not-allowed", "service-not-allowed", "audio-capture"})

# Debug ring buffer size (recognition events kept for inspection)
DEBUG_EVENT_CAPACITY = 50

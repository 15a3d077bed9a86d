"""Runaway repeat collapsing for recognized transcripts."""
from __future__ import annotations

import re
from typing import List, Optional

from .rules import MAX_CONSECUTIVE_REPEATS, REPEAT_TOKEN_LETTERS, RUNAWAY_THRESHOLD

_NON_TOKEN_CHARS = re.compile(rf"[^a-z0-9{REPEAT_TOKEN_LETTERS}]")


def repeat_key(token: str) -> str:
    """Comparison key for repeat runs: lower-cased, letters and digits only."""
    return _NON_TOKEN_CHARS.sub("", token.lower())


def collapse_runaway_repeats(
    text: Optional[str],
    runaway_threshold: int = RUNAWAY_THRESHOLD,
    max_consecutive: int = MAX_CONSECUTIVE_REPEATS,
) -> str:
    """Cut runs of the same token that no reader would produce.

    Works on raw whitespace tokens so casing and punctuation survive. A run
    of tokens sharing the same non-empty key that is at least
    ``runaway_threshold`` long keeps only its first ``max_consecutive``
    tokens. Shorter runs are left alone.

    Example: "no no no no no no no no no vale" -> "no no no vale"

    Args:
        text: Transcript text
        runaway_threshold: Minimum run length treated as an engine glitch
        max_consecutive: Tokens kept from a runaway run

    Returns:
        Transcript with runaway runs truncated, tokens joined by single spaces
    """
    tokens = (text or "").split()
    if not tokens:
        return ""

    output: List[str] = []
    index = 0
    while index < len(tokens):
        key = repeat_key(tokens[index])
        end = index + 1
        # tokens with an empty key never start a run
        while key and end < len(tokens) and repeat_key(tokens[end]) == key:
            end += 1

        if key and end - index >= runaway_threshold:
            output.extend(tokens[index:index + max_consecutive])
        else:
            output.extend(tokens[index:end])
        index = end

    return " ".join(output)

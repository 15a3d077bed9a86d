"""Merging of consecutive final recognition chunks into a stable transcript."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .rules import (
    MAX_HEAD_SKIP,
    REPLAY_CANDIDATE_COVERAGE,
    REPLAY_MIN_WORDS,
    REPLAY_PREVIOUS_COVERAGE,
)

logger = logging.getLogger(__name__)


def merge_words(text: str) -> List[str]:
    """Lower-cased whitespace tokens used to compare chunks."""
    return [token.lower() for token in text.split()]


def common_prefix_length(base: Sequence[str], probe: Sequence[str]) -> int:
    matched = 0
    limit = min(len(base), len(probe))
    while matched < limit and base[matched] == probe[matched]:
        matched += 1
    return matched


def _join(previous: str, tail: Sequence[str]) -> str:
    return f"{previous} {' '.join(tail)}".strip()


def merge_transcripts(previous_text: Optional[str], incoming_text: Optional[str]) -> str:
    """Append a final chunk to the stable transcript without duplicating speech.

    Engines do not always emit clean appends. A chunk can replay words the
    transcript already ends with, prepend a few stray tokens before such a
    replay, or re-emit most of the session from the start. Rules, first match
    wins:

    1. Either side empty -> the other side.
    2. One side ends with the other -> the longer side.
    3. Overlap: skipping 0..3 leading incoming words, find the longest run of
       words that ends ``previous`` and starts the rest of ``incoming``;
       append what follows it.
    4. Replay: with 12+ words on both sides, a shared prefix covering 80% of
       the incoming words and 60% of the previous words means the engine
       replayed the session; append only the new tail.
    5. Otherwise the chunk is new speech and is appended.

    Examples:
        merge_transcripts("el perro corre", "corre rapido")
        -> "el perro corre rapido"
        merge_transcripts("la casa es grande", "eh la casa es grande y bonita")
        -> "la casa es grande y bonita"

    Args:
        previous_text: Stable transcript so far
        incoming_text: New final chunk from the engine

    Returns:
        The merged stable transcript
    """
    previous = (previous_text or "").strip()
    incoming = (incoming_text or "").strip()

    if not previous:
        return incoming
    if not incoming:
        return previous
    if previous.endswith(incoming):
        logger.debug("Merge: incoming chunk already contained in transcript")
        return previous
    if incoming.endswith(previous):
        logger.debug("Merge: incoming chunk supersedes transcript")
        return incoming

    previous_norm = merge_words(previous)
    incoming_words = incoming.split()
    incoming_norm = merge_words(incoming)
    head_skip_window = min(MAX_HEAD_SKIP, max(0, len(incoming_words) - 1))

    for head_skip in range(head_skip_window + 1):
        candidate = incoming_norm[head_skip:]
        candidate_words = incoming_words[head_skip:]
        max_overlap = min(len(previous_norm), len(candidate))

        for overlap in range(max_overlap, 0, -1):
            if previous_norm[-overlap:] == candidate[:overlap]:
                logger.debug("Merge: overlap=%d head_skip=%d", overlap, head_skip)
                return _join(previous, candidate_words[overlap:])

    for head_skip in range(head_skip_window + 1):
        candidate = incoming_norm[head_skip:]
        candidate_words = incoming_words[head_skip:]
        if len(candidate) < REPLAY_MIN_WORDS or len(previous_norm) < REPLAY_MIN_WORDS:
            continue

        prefix = common_prefix_length(previous_norm, candidate)
        candidate_coverage = prefix / len(candidate)
        previous_coverage = prefix / len(previous_norm)

        if candidate_coverage >= REPLAY_CANDIDATE_COVERAGE and previous_coverage >= REPLAY_PREVIOUS_COVERAGE:
            logger.debug("Merge: replay of %d words detected (head_skip=%d)", prefix, head_skip)
            return _join(previous, candidate_words[prefix:])

    return f"{previous} {incoming}"

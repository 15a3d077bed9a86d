"""Data models for reference/transcript alignment."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class AlignmentResult:
    """Word error rate and per-word match flags for one comparison.

    Attributes:
        edit_distance: Word-level Levenshtein distance
        wer_ratio: edit_distance / len(reference_words), with an empty
            reference giving 1.0 for a non-empty hypothesis and 0.0 otherwise
        match_vector: One flag per reference word, True when matched
        reference_words: Normalized reference sequence that was compared
        hypothesis_words: Normalized hypothesis sequence that was compared
    """
    edit_distance: int
    wer_ratio: float
    match_vector: Tuple[bool, ...] = field(default_factory=tuple)
    reference_words: Tuple[str, ...] = field(default_factory=tuple)
    hypothesis_words: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def accuracy(self) -> float:
        return max(0.0, min(1.0, 1.0 - self.wer_ratio))

    @property
    def accuracy_percent(self) -> float:
        return self.accuracy * 100


@dataclass(frozen=True)
class ComparedToken:
    """A raw reference token classified for highlighting.

    Attributes:
        raw: Original surface form from the reference passage
        is_word: False for punctuation-only fragments
        missed: True only for words the reader did not say
    """
    raw: str
    is_word: bool
    missed: bool

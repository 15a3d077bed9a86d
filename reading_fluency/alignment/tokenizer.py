"""Reference text tokenization that keeps the raw rendering sequence."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .normalizer import LOCALE_LETTERS, tokenize_words

_RAW_TOKEN = re.compile(r"\S+")


@dataclass(frozen=True)
class RawToken:
    """A whitespace-delimited token of the original reference text.

    Attributes:
        raw: Surface form, punctuation included
        start: Character offset of the token in the source text
        end: Character offset one past the token
        normalized: Normalized words the token produced (empty for
            punctuation-only fragments such as "-" or "...")
        word_position: Index of the first normalized word in the comparison
            sequence, or None when the token is not a word
    """
    raw: str
    start: int
    end: int
    normalized: Tuple[str, ...]
    word_position: Optional[int]

    @property
    def is_word(self) -> bool:
        return self.word_position is not None

    @property
    def word_positions(self) -> range:
        if self.word_position is None:
            return range(0)
        return range(self.word_position, self.word_position + len(self.normalized))


def tokenize_reference(
    text: Optional[str],
    strip_accents: bool = True,
    extra_letters: str = LOCALE_LETTERS,
) -> Tuple[List[RawToken], List[str]]:
    """Tokenize reference text into raw tokens and the comparison sequence.

    Punctuation-only fragments stay in the raw sequence (so they can still be
    rendered) but contribute nothing to the comparison sequence.

    Args:
        text: The reference passage
        strip_accents: Passed through to the normalizer
        extra_letters: Passed through to the normalizer

    Returns:
        Tuple of (raw_tokens, reference_words)
    """
    raw_tokens: List[RawToken] = []
    reference_words: List[str] = []

    for match in _RAW_TOKEN.finditer(text or ""):
        words = tokenize_words(match.group(), strip_accents=strip_accents, extra_letters=extra_letters)
        position = len(reference_words) if words else None
        raw_tokens.append(
            RawToken(
                raw=match.group(),
                start=match.start(),
                end=match.end(),
                normalized=tuple(words),
                word_position=position,
            )
        )
        reference_words.extend(words)

    return raw_tokens, reference_words

"""Text normalization utilities for alignment and word counting."""
from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

# Letters kept besides [a-z0-9] when normalizing reference/transcript text.
# Only survives when accents are not stripped (NFD splits it into n + U+0303).
LOCALE_LETTERS = "ñ"

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(
    text: Optional[str],
    strip_accents: bool = True,
    extra_letters: str = LOCALE_LETTERS,
) -> str:
    """Normalize text into a comparable, space-separated word string.

    Lower-cases, optionally strips diacritics (canonical decomposition plus
    removal of combining marks), turns every character outside
    ``[a-z0-9<extra_letters>\\s]`` into a space and collapses whitespace.

    Args:
        text: Raw text (reference passage or recognized transcript)
        strip_accents: Remove diacritics before filtering characters
        extra_letters: Locale letters to keep in addition to ``a-z0-9``

    Returns:
        Normalized string, possibly empty
    """
    if not text:
        return ""

    normalized = text.lower()
    if strip_accents:
        normalized = unicodedata.normalize("NFD", normalized)
        normalized = _COMBINING_MARKS.sub("", normalized)

    allowed = "a-z0-9" + re.escape(extra_letters)
    normalized = re.sub(rf"[^{allowed}\s]", " ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def tokenize_words(
    text: Optional[str],
    strip_accents: bool = True,
    extra_letters: str = LOCALE_LETTERS,
) -> List[str]:
    """Split normalized text into word tokens.

    Example: "El perro, corre." -> ["el", "perro", "corre"]
    """
    normalized = normalize_text(text, strip_accents=strip_accents, extra_letters=extra_letters)
    if not normalized:
        return []
    return normalized.split(" ")

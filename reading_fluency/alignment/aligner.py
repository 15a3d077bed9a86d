"""Alignment orchestration between reference text and a reading transcript."""
from __future__ import annotations

from typing import List, Optional, Sequence

from ..models.alignment_result import AlignmentResult, ComparedToken
from .edit_distance import align_sequences, edit_distance_matrix, match_vector
from .normalizer import LOCALE_LETTERS, tokenize_words
from .tokenizer import tokenize_reference


def word_error_rate(distance: int, reference_length: int, hypothesis_length: int) -> float:
    """WER with the empty-reference policy: 1.0 if anything was said, else 0.0."""
    if reference_length == 0:
        return 1.0 if hypothesis_length > 0 else 0.0
    return distance / reference_length


def align_words(ref_words: Sequence[str], hyp_words: Sequence[str]) -> AlignmentResult:
    """Align two already-normalized word sequences."""
    dp = edit_distance_matrix(ref_words, hyp_words)
    distance = dp[len(ref_words)][len(hyp_words)]
    ops = align_sequences(ref_words, hyp_words, dp)
    return AlignmentResult(
        edit_distance=distance,
        wer_ratio=word_error_rate(distance, len(ref_words), len(hyp_words)),
        match_vector=tuple(match_vector(ref_words, ops)),
        reference_words=tuple(ref_words),
        hypothesis_words=tuple(hyp_words),
    )


def align(
    reference_text: Optional[str],
    hypothesis_text: Optional[str],
    strip_accents: bool = True,
    extra_letters: str = LOCALE_LETTERS,
) -> AlignmentResult:
    """Compare a reference passage with what the reader said.

    Example:
        align("uno dos tres", "uno doss tres") -> edit_distance 1,
        accuracy 2/3, match_vector (True, False, True)

    Args:
        reference_text: The passage the student was asked to read
        hypothesis_text: The final recognized transcript
        strip_accents: Passed through to the normalizer
        extra_letters: Passed through to the normalizer

    Returns:
        AlignmentResult with distance, WER and match vector
    """
    ref_words = tokenize_words(reference_text, strip_accents=strip_accents, extra_letters=extra_letters)
    hyp_words = tokenize_words(hypothesis_text, strip_accents=strip_accents, extra_letters=extra_letters)
    return align_words(ref_words, hyp_words)


def compute_accuracy(reference_text: Optional[str], hypothesis_text: Optional[str], **kwargs) -> float:
    """Accuracy in [0, 1] for the transcript against the reference."""
    return align(reference_text, hypothesis_text, **kwargs).accuracy


def compare_for_highlight(
    reference_text: Optional[str],
    hypothesis_text: Optional[str],
    strip_accents: bool = True,
    extra_letters: str = LOCALE_LETTERS,
) -> List[ComparedToken]:
    """Classify every raw token of the reference passage for rendering.

    Punctuation-only fragments are never marked missed. A word token is
    missed when its normalized position(s) found no match in the transcript.

    Example:
        compare_for_highlight("El perro, corre.", "el corre")
        -> El (ok), perro, (missed), corre. (ok)
    """
    raw_tokens, ref_words = tokenize_reference(
        reference_text, strip_accents=strip_accents, extra_letters=extra_letters
    )
    hyp_words = tokenize_words(hypothesis_text, strip_accents=strip_accents, extra_letters=extra_letters)
    matched = align_words(ref_words, hyp_words).match_vector

    compared: List[ComparedToken] = []
    for token in raw_tokens:
        missed = token.is_word and not all(matched[p] for p in token.word_positions)
        compared.append(ComparedToken(raw=token.raw, is_word=token.is_word, missed=missed))
    return compared


def render_highlight(tokens: Sequence[ComparedToken], marker: str = "[{}]") -> str:
    """Plain-text rendering of highlighted tokens, missed words wrapped in marker."""
    return " ".join(marker.format(t.raw) if t.missed else t.raw for t in tokens)

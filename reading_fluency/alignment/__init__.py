"""Alignment utilities for matching reference text to a reading transcript."""
from .aligner import align, align_words, compare_for_highlight, compute_accuracy, render_highlight
from .normalizer import normalize_text, tokenize_words
from .tokenizer import RawToken, tokenize_reference

__all__ = [
    "align",
    "align_words",
    "compare_for_highlight",
    "compute_accuracy",
    "render_highlight",
    "normalize_text",
    "tokenize_words",
    "RawToken",
    "tokenize_reference",
]

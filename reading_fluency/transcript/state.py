"""Transcript state owned by a single recognition session."""
from __future__ import annotations

from dataclasses import dataclass

from .collapse import collapse_runaway_repeats
from .merge import merge_transcripts


@dataclass
class TranscriptState:
    """Running transcript of one session.

    Attributes:
        stable_text: Finalized words, only ever extended by merges
        interim_text: Provisional words from the latest event, replaced wholesale
        combined_text: Collapsed stable + interim text shown to the reader
    """
    stable_text: str = ""
    interim_text: str = ""
    combined_text: str = ""

    def apply_final(self, final_chunk: str) -> None:
        """Merge a final chunk into the stable transcript."""
        if not final_chunk:
            return
        merged = merge_transcripts(self.stable_text, final_chunk)
        self.stable_text = collapse_runaway_repeats(merged)

    def replace_interim(self, interim_chunk: str) -> None:
        self.interim_text = interim_chunk.strip()

    def refresh_combined(self) -> str:
        self.combined_text = collapse_runaway_repeats(f"{self.stable_text} {self.interim_text}".strip())
        return self.combined_text

    def clear(self) -> None:
        self.stable_text = ""
        self.interim_text = ""
        self.combined_text = ""

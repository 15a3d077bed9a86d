"""Inbound recognition engine events, validated once at ingestion."""
from __future__ import annotations

from typing import Annotated, Any, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..transcript.rules import FATAL_ERROR_KINDS
from .errors import InvalidEventError


class ResultEntry(BaseModel):
    """One recognition result: best-alternative transcript and finality."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    transcript: str = ""
    is_final: bool = Field(default=False, alias="isFinal")

    @field_validator("transcript", mode="before")
    @classmethod
    def _absent_transcript_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ResultEvent(BaseModel):
    """Results from ``result_index`` onward changed since the last event."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["result"] = "result"
    result_index: int = Field(default=0, ge=0, alias="resultIndex")
    results: List[ResultEntry] = Field(default_factory=list)

    def split_chunks(self) -> Tuple[str, str]:
        """Return (final_chunk, interim_chunk) for the entries of this event."""
        final_pieces: List[str] = []
        interim_pieces: List[str] = []
        for entry in self.results[self.result_index:]:
            piece = entry.transcript.strip()
            if not piece:
                continue
            if entry.is_final:
                final_pieces.append(piece)
            else:
                interim_pieces.append(piece)
        return " ".join(final_pieces), " ".join(interim_pieces)


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    error: str = "unknown"
    message: Optional[str] = None

    @field_validator("error", mode="before")
    @classmethod
    def _absent_error_is_unknown(cls, value: Any) -> Any:
        return "unknown" if value is None else value

    @property
    def fatal(self) -> bool:
        return self.error in FATAL_ERROR_KINDS


class EndEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["end"] = "end"


RecognitionEvent = Annotated[Union[ResultEvent, ErrorEvent, EndEvent], Field(discriminator="type")]

_EVENT_ADAPTER: TypeAdapter = TypeAdapter(RecognitionEvent)


def parse_event(payload: Union[Mapping[str, Any], BaseModel]):
    """Validate a raw engine payload into a typed event.

    Accepts snake_case or the browser's camelCase field names
    (``resultIndex``, ``isFinal``).

    Raises:
        InvalidEventError: when the payload does not describe a known event
    """
    if isinstance(payload, (ResultEvent, ErrorEvent, EndEvent)):
        return payload
    try:
        return _EVENT_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise InvalidEventError(f"Invalid recognition event: {e.error_count()} validation error(s)", cause=e) from e

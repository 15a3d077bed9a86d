import pytest

from reading_fluency.recognition.errors import InvalidEventError
from reading_fluency.recognition.events import (
    EndEvent,
    ErrorEvent,
    ResultEvent,
    parse_event,
)


def test_parse_result_event():
    event = parse_event({
        "type": "result",
        "result_index": 1,
        "results": [
            {"transcript": "hola", "is_final": True},
            {"transcript": " que tal ", "is_final": True},
            {"transcript": "como", "is_final": False},
        ],
    })

    assert isinstance(event, ResultEvent)
    assert event.result_index == 1
    assert event.split_chunks() == ("que tal", "como")


def test_parse_browser_field_names():
    event = parse_event({
        "type": "result",
        "resultIndex": 0,
        "results": [{"transcript": "hola", "isFinal": True}],
    })

    assert event.results[0].is_final is True
    assert event.split_chunks() == ("hola", "")


def test_absent_transcript_is_empty():
    event = parse_event({"type": "result", "results": [{"transcript": None, "is_final": True}]})
    assert event.split_chunks() == ("", "")


def test_split_chunks_joins_pieces_and_skips_blanks():
    event = ResultEvent(results=[
        {"transcript": "uno", "is_final": True},
        {"transcript": "   ", "is_final": True},
        {"transcript": "dos", "is_final": True},
        {"transcript": "tr", "is_final": False},
        {"transcript": "es", "is_final": False},
    ])
    assert event.split_chunks() == ("uno dos", "tr es")


def test_parse_error_and_end_events():
    error = parse_event({"type": "error", "error": "audio-capture"})
    end = parse_event({"type": "end"})

    assert isinstance(error, ErrorEvent) and error.fatal
    assert isinstance(end, EndEvent)


@pytest.mark.parametrize("kind, fatal", [
    ("not-allowed", True),
    ("service-not-allowed", True),
    ("audio-capture", True),
    ("network", False),
    ("no-speech", False),
    ("aborted", False),
])
def test_error_fatality(kind, fatal):
    assert ErrorEvent(error=kind).fatal is fatal


def test_absent_error_kind_is_unknown():
    event = parse_event({"type": "error", "error": None})

    assert event.error == "unknown"
    assert not event.fatal


def test_parse_event_passes_models_through():
    event = EndEvent()
    assert parse_event(event) is event


@pytest.mark.parametrize("payload", [
    {"type": "restart"},
    {"results": []},
    {"type": "result", "result_index": -1, "results": []},
    {"type": "result", "results": "hola"},
    "end",
])
def test_invalid_payloads_rejected(payload):
    with pytest.raises(InvalidEventError) as exc_info:
        parse_event(payload)
    assert exc_info.value.stage == "ingestion"
    assert exc_info.value.cause is not None

import pytest

from reading_fluency.recognition.controller import RecognitionSessionController, SessionConfig
from reading_fluency.recognition.scheduler import ManualScheduler


class FakeEngine:
    """Records lifecycle calls; can be told to fail on start."""

    def __init__(self):
        self.starts = 0
        self.stops = 0
        self.fail_start = False
        self.langs = []

    def start(self, lang):
        if self.fail_start:
            raise RuntimeError("engine busy")
        self.starts += 1
        self.langs.append(lang)

    def stop(self):
        self.stops += 1


def result(*entries, index=0):
    """Build a result event payload from (transcript, is_final) pairs."""
    return {
        "type": "result",
        "result_index": index,
        "results": [{"transcript": text, "is_final": final} for text, final in entries],
    }


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def errors():
    return []


@pytest.fixture
def controller(engine, scheduler, errors):
    return RecognitionSessionController(
        engine,
        config=SessionConfig(debug=True),
        scheduler=scheduler,
        on_error=errors.append,
    )

import time
from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeEngine, result
from reading_fluency.recognition.controller import (
    RecognitionSessionController,
    SessionConfig,
    SessionState,
    restart_delay_ms,
)
from reading_fluency.recognition.errors import (
    EngineFatalError,
    EngineTransientError,
    EngineUnavailableError,
    InvalidSessionStateError,
)
from reading_fluency.recognition.events import EndEvent
from reading_fluency.recognition.scheduler import ManualScheduler, ThreadingScheduler

END = {"type": "end"}


def next_delay(scheduler):
    return scheduler.pending[-1].due_ms - scheduler.now_ms


def test_start_listens(controller, engine):
    controller.start()

    assert controller.state is SessionState.LISTENING
    assert controller.listening
    assert engine.starts == 1


def test_engine_started_with_configured_language(engine, scheduler):
    controller = RecognitionSessionController(engine, config=SessionConfig(lang="es-MX"), scheduler=scheduler)
    controller.start()
    controller.dispatch(END)
    scheduler.run_pending()

    assert engine.langs == ["es-MX", "es-MX"]


def test_final_chunks_merge_and_interim_replaces(controller):
    controller.start()
    controller.dispatch(result(("el perro", True), ("cor", False)))

    assert controller.final_text == "el perro"
    assert controller.interim_text == "cor"
    assert controller.combined_text == "el perro cor"

    controller.dispatch(result(("corre", False)))
    assert controller.final_text == "el perro"
    assert controller.interim_text == "corre"
    assert controller.combined_text == "el perro corre"

    controller.dispatch(result(("perro corre rapido", True)))
    assert controller.final_text == "el perro corre rapido"
    assert controller.interim_text == ""
    assert controller.combined_text == "el perro corre rapido"


def test_interim_never_reaches_stable_text(controller):
    controller.start()
    for partial in ["ho", "hola", "hola mun", "hola mundo"]:
        controller.dispatch(result((partial, False)))

    assert controller.final_text == ""
    assert controller.interim_text == "hola mundo"


def test_result_index_skips_earlier_entries(controller):
    controller.start()
    controller.dispatch(result(("viejo", True), ("nuevo", True), index=1))

    assert controller.final_text == "nuevo"


def test_stray_prefix_replay_through_events(controller):
    controller.start()
    controller.dispatch(result(("la casa es grande", True)))
    controller.dispatch(result(("eh la casa es grande y bonita", True)))

    assert controller.final_text == "la casa es grande y bonita"


def test_runaway_repeats_collapsed_in_stream(controller):
    controller.start()
    controller.dispatch(result((" ".join(["la"] * 9), True)))
    controller.dispatch(result(("la la la la la la la", False)))

    assert controller.final_text == "la la la"
    assert controller.combined_text == "la la la"


def test_stable_text_never_shrinks(controller):
    controller.start()
    chunks = ["había una vez", "una vez un ratón", "ratón", "", "eh un ratón pequeño", "que vivía"]
    previous_count = 0
    for chunk in chunks:
        controller.dispatch(result((chunk, True), ("y", False)))
        count = len(controller.final_text.split())
        assert count >= previous_count
        previous_count = count

    assert controller.final_text == "había una vez un ratón pequeño que vivía"


def test_end_schedules_restart(controller, engine, scheduler):
    controller.start()
    controller.dispatch(END)

    assert controller.state is SessionState.RESTARTING
    assert controller.listening
    assert controller.pending_restart
    assert next_delay(scheduler) == 150

    assert scheduler.advance(149) == 0
    assert engine.starts == 1
    assert scheduler.advance(1) == 1
    assert engine.starts == 2
    assert controller.state is SessionState.LISTENING
    assert not controller.pending_restart


def test_backoff_grows_and_caps(controller, scheduler):
    controller.start()
    delays = []
    for _ in range(13):
        controller.dispatch(END)
        delays.append(next_delay(scheduler))
        scheduler.run_pending()

    assert delays == [150, 300, 450, 600, 750, 900, 1050, 1200, 1350, 1500, 1600, 1600, 1600]
    assert controller.restart_attempts == 13


def test_restart_delay_ms():
    assert restart_delay_ms(0) == 150
    assert restart_delay_ms(20) == 1600
    assert restart_delay_ms(1, base_ms=100, max_ms=150) == 150


def test_result_resets_restart_attempts(controller, scheduler):
    controller.start()
    controller.dispatch(END)
    scheduler.run_pending()
    controller.dispatch(END)
    assert next_delay(scheduler) == 300
    scheduler.run_pending()

    controller.dispatch(result(("hola", True)))
    assert controller.restart_attempts == 0

    controller.dispatch(END)
    assert next_delay(scheduler) == 150


def test_stop_cancels_pending_restart(controller, engine, scheduler):
    controller.start()
    controller.dispatch(END)
    controller.stop()

    assert scheduler.run_pending() == 0
    assert engine.starts == 1
    assert engine.stops == 1
    assert controller.state is SessionState.IDLE
    assert not controller.listening


def test_stop_is_safe_in_any_state(controller, engine):
    controller.stop()
    controller.stop()
    assert controller.state is SessionState.IDLE

    controller.start()
    controller.stop()
    assert engine.stops == 3


def test_end_after_stop_stays_idle(controller, scheduler):
    controller.start()
    controller.stop()
    controller.dispatch(EndEvent())

    assert controller.state is SessionState.IDLE
    assert scheduler.pending == []


def test_fatal_error_stops_without_restart(controller, scheduler, errors):
    controller.start()
    controller.dispatch({"type": "error", "error": "not-allowed"})

    assert controller.state is SessionState.IDLE
    assert controller.last_error == "not-allowed"
    assert isinstance(errors[-1], EngineFatalError)
    assert errors[-1].fatal

    controller.dispatch(END)
    assert scheduler.pending == []
    assert controller.state is SessionState.IDLE


def test_fatal_error_cancels_pending_restart(controller, engine, scheduler):
    controller.start()
    controller.dispatch(END)
    controller.dispatch({"type": "error", "error": "audio-capture"})

    assert scheduler.run_pending() == 0
    assert engine.starts == 1
    assert controller.state is SessionState.IDLE


def test_transient_error_keeps_listening(controller, scheduler, errors):
    controller.start()
    controller.dispatch({"type": "error", "error": "network"})

    assert controller.state is SessionState.LISTENING
    assert controller.last_error == "network"
    assert isinstance(errors[-1], EngineTransientError)
    assert not errors[-1].fatal

    controller.dispatch(END)
    assert controller.state is SessionState.RESTARTING
    assert len(scheduler.pending) == 1


def test_error_without_kind_is_transient(controller, scheduler, errors):
    controller.start()
    controller.dispatch({"type": "error", "error": None})

    assert controller.state is SessionState.LISTENING
    assert controller.last_error == "unknown"
    assert isinstance(errors[-1], EngineTransientError)

    controller.dispatch(END)
    assert len(scheduler.pending) == 1


def test_start_clears_previous_error(controller):
    controller.start()
    controller.dispatch({"type": "error", "error": "no-speech"})
    controller.stop()
    controller.start()

    assert controller.error is None


def test_failed_restart_waits_for_next_event(controller, engine, scheduler):
    controller.start()
    controller.dispatch(END)
    engine.fail_start = True
    scheduler.run_pending()

    assert controller.state is SessionState.RESTARTING

    engine.fail_start = False
    controller.dispatch(END)
    assert next_delay(scheduler) == 300
    scheduler.run_pending()
    assert controller.state is SessionState.LISTENING


def test_engine_start_failure_still_listening(scheduler):
    engine = FakeEngine()
    engine.fail_start = True
    controller = RecognitionSessionController(engine, scheduler=scheduler)
    controller.start()

    assert controller.listening


def test_missing_engine_reports_unsupported(scheduler):
    errors = []
    controller = RecognitionSessionController(None, scheduler=scheduler, on_error=errors.append)
    controller.start()

    assert not controller.supported
    assert controller.state is SessionState.IDLE
    assert controller.last_error == "unsupported"
    assert isinstance(errors[0], EngineUnavailableError)


def test_reset_requires_idle(controller):
    controller.start()
    controller.dispatch(result(("hola", True)))

    with pytest.raises(InvalidSessionStateError):
        controller.reset()

    controller.stop()
    controller.reset()
    assert controller.final_text == ""
    assert controller.interim_text == ""
    assert controller.combined_text == ""
    assert controller.error is None
    assert controller.debug_events == []


def test_debug_events_ring_buffer(controller):
    controller.start()
    for i in range(60):
        controller.dispatch(result((f"palabra{i}", False)))

    events = controller.debug_events
    assert len(events) == 50
    assert events[-1].interim_chunk == "palabra59"
    assert events[-1].results_length == 1


def test_debug_events_off_by_default(engine, scheduler):
    controller = RecognitionSessionController(engine, scheduler=scheduler)
    controller.start()
    controller.dispatch(result(("hola", True)))

    assert controller.debug_events == []


def test_on_update_receives_combined_text(engine, scheduler):
    updates = []
    controller = RecognitionSessionController(engine, scheduler=scheduler, on_update=updates.append)
    controller.start()
    controller.dispatch(result(("hola", True), ("mun", False)))
    controller.dispatch(result(("mundo", True)))

    assert updates == ["hola mun", "hola mundo"]


def test_feed_applies_events_in_order(controller):
    controller.start()
    controller.feed([
        result(("uno dos", True)),
        result(("dos tres", True)),
        result(("cuatro", False)),
    ])

    assert controller.combined_text == "uno dos tres cuatro"


def test_stop_and_score(controller, engine):
    started_at = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
    controller.start()
    controller.dispatch(result(("el perro", True), ("corre", False)))

    session = controller.stop_and_score("El perro corre.", started_at, started_at + timedelta(seconds=30))

    assert engine.stops == 1
    assert session.accuracy_percent == 100
    assert session.word_count_read == 3
    assert session.wpm == 6.0
    assert session.duration_seconds == 30
    assert session.invalid_short is False


def test_threading_timer_never_fires_after_stop():
    engine = FakeEngine()
    controller = RecognitionSessionController(
        engine,
        config=SessionConfig(restart_base_delay_ms=20),
        scheduler=ThreadingScheduler(),
    )
    controller.start()
    controller.dispatch(END)
    controller.stop()
    time.sleep(0.1)

    assert engine.starts == 1


def test_threading_timer_restarts_engine():
    engine = FakeEngine()
    controller = RecognitionSessionController(
        engine,
        config=SessionConfig(restart_base_delay_ms=10),
        scheduler=ThreadingScheduler(),
    )
    controller.start()
    controller.dispatch(END)

    deadline = time.monotonic() + 2.0
    while engine.starts < 2 and time.monotonic() < deadline:
        time.sleep(0.01)

    assert engine.starts == 2
    assert controller.state is SessionState.LISTENING
    controller.stop()


def test_manual_scheduler_orders_calls():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(200, lambda: fired.append("b"))
    scheduler.call_later(100, lambda: fired.append("a"))
    cancelled = scheduler.call_later(50, lambda: fired.append("x"))
    cancelled.cancel()

    assert scheduler.advance(150) == 1
    assert scheduler.run_pending() == 1
    assert fired == ["a", "b"]

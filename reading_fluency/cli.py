"""Command line entry point: score a transcript or replay a recorded event log."""
from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .alignment.aligner import compare_for_highlight, render_highlight
from .logging_config import setup_logging
from .recognition.controller import RecognitionSessionController, SessionConfig
from .recognition.errors import InvalidEventError
from .recognition.scheduler import ManualScheduler
from .scorer.session_scorer import generate_session_report

logger = logging.getLogger(__name__)


class NullEngine:
    """Stand-in engine for replaying recorded events."""

    def __init__(self) -> None:
        self.starts = 0

    def start(self, lang: str) -> None:
        self.starts += 1

    def stop(self) -> None:
        pass


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _read_events(path: str) -> List[Dict[str, Any]]:
    events = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line:
            events.append(json.loads(line))
    return events


def replay_events(
    events: List[Dict[str, Any]],
    config: Optional[SessionConfig] = None,
) -> RecognitionSessionController:
    """Run recorded engine events through a fresh controller.

    Restarts scheduled by end events fire before the next event is applied.
    """
    scheduler = ManualScheduler()
    controller = RecognitionSessionController(NullEngine(), config=config, scheduler=scheduler)
    controller.start()
    for event in events:
        controller.dispatch(event)
        scheduler.run_pending()
    controller.stop()
    return controller


def _print_report(report: Dict[str, Any], transcript: str, reference: str) -> None:
    summary = report["summary"]
    print("=== Session Summary ===")
    print(f"Words read: {summary['word_count_read']}")
    print(f"Duration: {summary['duration_seconds']}s")
    print(f"WPM: {summary['wpm']:.2f}")
    print(f"Accuracy: {summary['accuracy_percent']:.1f}%")
    if summary["invalid_short"]:
        print("Short reading (<10s), review validity.")
    print()
    print("=== Transcript ===")
    print(transcript)
    print()
    print("=== Reference (missed words in brackets) ===")
    print(render_highlight(compare_for_highlight(reference, transcript)))


def _score(reference: str, transcript: str, duration: int, as_json: bool) -> None:
    ended_at = datetime.now(timezone.utc)
    started_at = ended_at - timedelta(seconds=duration)
    report = generate_session_report(reference, transcript, started_at, ended_at)
    if as_json:
        report["transcript"] = transcript
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        _print_report(report, transcript, reference)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reading_fluency",
        description="Score oral reading transcripts against a reference passage.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score a finished transcript")
    score.add_argument("--reference", required=True, help="File with the reference passage")
    score.add_argument("--transcript", required=True, help="File with the recognized transcript")
    score.add_argument("--duration", type=int, required=True, help="Reading time in seconds")
    score.add_argument("--json", action="store_true", help="Print the report as JSON")

    replay = sub.add_parser("replay", help="Replay a JSON-lines recognition event log")
    replay.add_argument("--reference", required=True, help="File with the reference passage")
    replay.add_argument("--events", required=True, help="JSON-lines file, one engine event per line")
    replay.add_argument("--duration", type=int, default=60, help="Reading time in seconds (default: 60)")
    replay.add_argument("--debug", action="store_true", help="Print the per-event debug log")
    replay.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        reference = _read_text(args.reference)
        if args.command == "score":
            transcript = _read_text(args.transcript).strip()
        else:
            controller = replay_events(_read_events(args.events), SessionConfig(debug=args.debug))
            transcript = controller.combined_text
            if args.debug:
                for event in controller.debug_events:
                    print(f"[{event.result_index}] final={event.final_chunk!r} "
                          f"interim={event.interim_chunk!r} -> {event.combined_transcript!r}")
    except (OSError, json.JSONDecodeError, InvalidEventError) as e:
        logger.error("Invalid input: %s", e)
        return 2

    _score(reference, transcript, args.duration, args.json)
    return 0

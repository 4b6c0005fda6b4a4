"""Chat transcript logger – long-running entry point.

Reads chat events as NDJSON from stdin (one ChatMessage object per line)
and records them into daily plaintext + HTML logs.  Any chat bridge can
pipe its room messages in, e.g.::

    irc-bridge --json | transcript-logger

Configuration comes from the YAML file named by TRANSCRIPT_CONFIG (optional)
plus TRANSCRIPT_* environment overrides (see config.py).
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Iterable, TextIO

from config import ConfigError, load_config
from models import ChatMessage
from transcript_logger import TranscriptLogger

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
log = logging.getLogger("transcript-logger")

_shutdown = threading.Event()


def _handle_signal(signum: int, _frame) -> None:
    log.info("Signal %s received, shutting down gracefully...", signum)
    _shutdown.set()


def parse_events(lines: Iterable[str]) -> Iterable[ChatMessage]:
    """Yield ChatMessages from NDJSON lines. Blank and invalid lines are skipped."""
    invalid_count = 0
    for idx, line in enumerate(lines, 1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            yield ChatMessage.model_validate_json(stripped)
        except ValueError as e:
            invalid_count += 1
            if invalid_count <= 5:
                log.warning("Skipping invalid event on line %d: %s", idx, e)
    if invalid_count > 5:
        log.warning("Skipped %d invalid events (only first 5 shown)", invalid_count)


def pump_events(transcript: TranscriptLogger, stream: TextIO, errors: list[BaseException]) -> None:
    """Record every event from *stream*; stop on the first write failure."""
    try:
        for message in parse_events(stream):
            if _shutdown.is_set():
                break
            transcript.on_channel_message(message)
    except Exception as exc:
        log.exception("Recording failed; stopping")
        errors.append(exc)
    finally:
        _shutdown.set()


def main() -> int:
    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    config_path = (os.environ.get("TRANSCRIPT_CONFIG") or "").strip()
    try:
        config = load_config(Path(config_path) if config_path else None)
    except (ConfigError, FileNotFoundError) as e:
        log.error("Configuration error: %s", e)
        return 2

    log.info("=== Transcript logger starting ===")
    log.info("Room: %s | Plain: %s | HTML: %s",
             config.room_name, config.plaintext_log_dir, config.html_log_dir)

    errors: list[BaseException] = []
    transcript = TranscriptLogger(config, on_error=errors.append)
    try:
        transcript.on_connect()
        reader = threading.Thread(
            target=pump_events,
            args=(transcript, sys.stdin, errors),
            daemon=True,
            name="transcript-stdin",
        )
        reader.start()

        # Poll so signals are handled promptly while the reader blocks on stdin
        while not _shutdown.is_set():
            if errors:
                break
            time.sleep(0.5)
    finally:
        transcript.close()

    log.info("=== Transcript logger stopped ===")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())

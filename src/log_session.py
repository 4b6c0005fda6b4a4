"""Daily log session: the single writer for plaintext + HTML transcripts.

Owns the pair of open files for the current calendar day and serializes
every write, rollover and shutdown through one lock so that:

- each message lands in both files, in the same order, with no gaps
- the HTML document is never torn (header ... rows ... footer)
- nothing is written to a half-closed or half-opened pair of files

File layout (per day):
- ``<plaintext_log_dir>/YYYY-MM-DD.log``       append mode (survives restarts)
- ``<html_log_dir>/YYYY-MM-DD.log.html``       truncated on every (re)open
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from config import ConfigError, TranscriptConfig
from html_document import HtmlDocument
from models import ChatMessage
from plaintext_writer import append_line
from role_classifier import classify

logger = logging.getLogger(__name__)

PLAINTEXT_SUFFIX = ".log"
HTML_SUFFIX = ".log.html"


class LogSessionError(RuntimeError):
    """Session used outside its lifecycle, or after a failed write."""


def day_filename(day: date, suffix: str) -> str:
    return day.strftime("%Y-%m-%d") + suffix


class LogSession:
    """Lifecycle and serialization authority for one room's transcript."""

    def __init__(
        self,
        config: TranscriptConfig,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._clock = clock
        self._lock = threading.Lock()

        self._current_day: Optional[date] = None
        self._plain: Optional[TextIO] = None
        self._html_handle: Optional[TextIO] = None
        self._document: Optional[HtmlDocument] = None
        self._plaintext_path: Optional[Path] = None
        self._html_path: Optional[Path] = None
        self._message_sequence = 0

        self._started = False
        self._shut_down = False
        self._compromised = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current_day(self) -> Optional[date]:
        return self._current_day

    @property
    def message_sequence(self) -> int:
        return self._message_sequence

    @property
    def is_open(self) -> bool:
        return self._plain is not None and self._html_handle is not None

    @property
    def compromised(self) -> bool:
        return self._compromised

    @property
    def plaintext_path(self) -> Optional[Path]:
        return self._plaintext_path

    @property
    def html_path(self) -> Optional[Path]:
        return self._html_path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self, now: Optional[datetime] = None) -> None:
        """Open today's files and write the HTML header.

        Raises:
            ConfigError: If a log directory or the room name is missing.
            LogSessionError: If the session was already started.
        """
        self._validate_config()
        with self._lock:
            if self._started:
                raise LogSessionError("log session already started")
            self._config.plaintext_log_dir.mkdir(parents=True, exist_ok=True)
            self._config.html_log_dir.mkdir(parents=True, exist_ok=True)
            self._open_day_locked((now or self._clock()).date())
            self._started = True
        logger.info(
            "Log session started (room=%s plain=%s html=%s)",
            self._config.room_name,
            self._config.plaintext_log_dir,
            self._config.html_log_dir,
        )

    def record(self, message: ChatMessage) -> int:
        """Write *message* to both files atomically; return its row id."""
        with self._lock:
            self._require_writable_locked()
            self._message_sequence += 1
            sequence_id = self._message_sequence
            try:
                append_line(self._plain, message, self._config.time_log_format)
                self._document.append_row(
                    sequence_id,
                    message,
                    classify(message.sender_role_flags),
                    self._config.time_log_format,
                )
            except Exception:
                self._compromised = True
                logger.exception(
                    "Transcript write failed; session compromised for %s", self._current_day
                )
                raise
            return sequence_id

    def check_rollover(self, now: Optional[datetime] = None) -> bool:
        """Roll over if *now* falls on a different calendar day.

        Same-day calls are no-ops and return ``False``.
        """
        now = now or self._clock()
        with self._lock:
            if not self._started or self._shut_down:
                return False
            if now.date() == self._current_day:
                return False
            self._rollover_locked(now.date())
            return True

    def rollover(self, now: Optional[datetime] = None) -> None:
        """Finish the current day's files and open a fresh pair for *now*."""
        now = now or self._clock()
        with self._lock:
            if not self._started or self._shut_down:
                raise LogSessionError("rollover requires a started, running session")
            self._rollover_locked(now.date())

    def shutdown(self) -> None:
        """Write the HTML footer and close both files. Later calls are no-ops."""
        with self._lock:
            if not self._started or self._shut_down:
                return
            self._shut_down = True
            self._close_day_locked()
        logger.info("Log session shut down (room=%s)", self._config.room_name)

    def __enter__(self) -> "LogSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Internals (caller holds self._lock)
    # ------------------------------------------------------------------

    def _validate_config(self) -> None:
        cfg = self._config
        if not cfg.plaintext_log_dir or not cfg.html_log_dir:
            raise ConfigError("plaintext_log_dir and html_log_dir are required")
        if not (cfg.room_name or "").strip():
            raise ConfigError("room_name is required")

    def _require_writable_locked(self) -> None:
        if not self._started:
            raise LogSessionError("record() called before start()")
        if self._shut_down:
            raise LogSessionError("record() called after shutdown()")
        if self._compromised or not self.is_open:
            raise LogSessionError(
                f"log session for {self._current_day} is compromised; refusing to write"
            )

    def _rollover_locked(self, day: date) -> None:
        logger.info("Rolling over transcript logs: %s -> %s", self._current_day, day)
        try:
            self._close_day_locked()
            self._open_day_locked(day)
        except Exception:
            self._compromised = True
            logger.exception("Log rollover to %s failed", day)
            raise
        self._compromised = False

    def _open_day_locked(self, day: date) -> None:
        cfg = self._config
        plaintext_path = cfg.plaintext_log_dir / day_filename(day, PLAINTEXT_SUFFIX)
        html_path = cfg.html_log_dir / day_filename(day, HTML_SUFFIX)

        logger.info("Opening new logfiles: %s, %s", plaintext_path, html_path)
        plain = open(plaintext_path, "a", encoding="utf-8")
        try:
            # An HTML document cannot be resumed, so a same-day restart starts over.
            html_handle = open(html_path, "w", encoding="utf-8")
        except Exception:
            plain.close()
            raise
        document = HtmlDocument(html_handle, escape=cfg.escape_html)
        try:
            document.open(cfg.room_name, day, cfg.extra_head)
        except Exception:
            html_handle.close()
            plain.close()
            raise

        self._plain = plain
        self._html_handle = html_handle
        self._document = document
        self._plaintext_path = plaintext_path
        self._html_path = html_path
        self._current_day = day
        self._message_sequence = 0

    def _close_day_locked(self) -> None:
        plain, html_handle, document = self._plain, self._html_handle, self._document
        self._plain = None
        self._html_handle = None
        self._document = None
        try:
            if document is not None and document.state == HtmlDocument.OPEN:
                document.close()
        finally:
            try:
                if html_handle is not None:
                    html_handle.close()
            finally:
                if plain is not None:
                    plain.close()

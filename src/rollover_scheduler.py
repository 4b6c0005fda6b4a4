"""Periodic day-change check for a LogSession.

Runs independently of message traffic so an idle room still rolls over
shortly after midnight (within one polling interval).
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from log_session import LogSession

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0


class RolloverScheduler:
    """Background thread calling ``session.check_rollover`` every interval."""

    def __init__(
        self,
        session: LogSession,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive: {interval_seconds}")
        self._session = session
        self._interval = float(interval_seconds)
        self._clock = clock
        self._on_error = on_error
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="transcript-rollover",
        )
        self._thread.start()
        logger.info("Rollover scheduler started (interval: %.1fs)", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
        # A thread still alive after a timed-out join stays tracked so that
        # start() cannot launch a second poller.
        if not thread.is_alive():
            self._thread = None

    def tick(self, now: datetime | None = None) -> bool:
        """Run one check; return True if the session rolled over."""
        return self._session.check_rollover(now or self._clock())

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.tick()
            except Exception as exc:
                logger.exception("Rollover check failed; stopping scheduler")
                if self._on_error is not None:
                    self._on_error(exc)
                return

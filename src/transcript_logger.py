"""Host-facing transcript logger.

Wires the chat layer's callbacks to one LogSession plus its rollover
scheduler:

- on_connect           -> start the session and the scheduler
- on_channel_message   -> record one message
- close                -> stop the scheduler, write footers, close files
"""

from __future__ import annotations

import atexit
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from config import TranscriptConfig
from log_session import LogSession
from models import ChatMessage
from rollover_scheduler import RolloverScheduler

logger = logging.getLogger(__name__)


class TranscriptLogger:
    """Owns the session lifetime for a single logged room."""

    def __init__(
        self,
        config: TranscriptConfig,
        *,
        clock: Callable[[], datetime] = datetime.now,
        register_atexit: bool = True,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.config = config
        self.session = LogSession(config, clock=clock)
        self.scheduler = RolloverScheduler(
            self.session,
            interval_seconds=config.rollover_interval_seconds,
            clock=clock,
            on_error=on_error,
        )
        self._register_atexit = register_atexit
        self._lock = threading.Lock()
        self._connected = False
        self._closed = False

    def on_connect(self, *_args) -> None:
        """Start logging. Reconnects while the session is open are ignored."""
        with self._lock:
            if self._closed:
                logger.warning("on_connect after close; ignoring")
                return
            if self._connected:
                logger.info("Reconnect detected; transcript session already open")
                return
            self.session.start()
            self._connected = True
            if self._register_atexit:
                atexit.register(self.close)
            self.scheduler.start()

    def on_channel_message(self, message: ChatMessage) -> int:
        return self.session.record(message)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.scheduler.stop()
        self.session.shutdown()
        if self._register_atexit:
            atexit.unregister(self.close)

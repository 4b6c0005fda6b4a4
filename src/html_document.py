"""HTML transcript document writer.

Keeps one day's HTML log a complete document on disk:

    open()        -> doctype, head, heading, nick legend, <table>
    append_row()  -> one <tr> per message
    close()       -> </table></body></html>

Rows are appended live, so the file is only valid HTML once ``close()`` has
run.  Rendering is split into pure ``render_*`` helpers and the stateful
``HtmlDocument`` wrapper that enforces the open/append/close order.
"""

from __future__ import annotations

import html
import os
from datetime import date
from typing import TextIO

from models import Badge, ChatMessage


ROW_ID_PREFIX = "msg-"

DEFAULT_CSS = """\
    <style type="text/css">
    body {
       background-color: white;
    }
    .chattable {
        border-collapse: collapse;
     }
    .msgnick {
        border-right: 1px solid black;
        padding-right: 8px;
        padding-left: 4px;
    }
    .opped {
        color: #006e21;
        font-weight: bold;
     }
     .halfopped {
        color: #006e21;
     }
    .voiced {
        color: #00a5ff;
        font-style: italic;
     }
    .msgmessage {
        padding-left: 8px;
    }
    </style>
"""


class HtmlDocumentStateError(RuntimeError):
    """Raised when a document operation is called in the wrong state."""


def _text(value: str, escape: bool) -> str:
    return html.escape(value, quote=False) if escape else value


def render_header(room_name: str, day: date, extra_head: str, *, escape: bool = True) -> str:
    room = _text(room_name, escape)
    day_text = day.strftime("%Y-%m-%d")
    return (
        "<!DOCTYPE HTML>\n"
        "<html>\n"
        "  <head>\n"
        f"    <title>Chatlogs {room} {day_text}</title>\n"
        '    <meta charset="utf-8"/>\n'
        f"{extra_head}\n"
        "  </head>\n"
        "  <body>\n"
        f"    <h1>Chatlogs for {room}, {day_text}</h1>\n"
        "    <p>Nick colors:</p>\n"
        "    <dl>\n"
        '      <dt class="opped">Nick</dt><dd>Channel operator (+o)</dd>\n'
        '      <dt class="halfopped">Nick</dt><dd>Channel half-operator (+h)</dd>\n'
        '      <dt class="voiced">Nick</dt><dd>Nick is voiced (+v)</dd>\n'
        "      <dt>Nick</dt><dd>Normal nick</dd>\n"
        "    </dl>\n"
        "    <hr/>\n"
        '    <table class="chattable">\n'
    )


def render_row(
    sequence_id: int,
    message: ChatMessage,
    badge: Badge,
    time_format: str,
    *,
    escape: bool = True,
) -> str:
    """Render one ``<tr>``; the id is ``msg-<sequence_id>``."""
    return (
        f'      <tr id="{ROW_ID_PREFIX}{sequence_id}">\n'
        f'        <td class="msgtime">{message.timestamp.strftime(time_format)}</td>\n'
        f'        <td class="msgnick {badge.value}">{_text(message.sender_name, escape)}</td>\n'
        f'        <td class="msgmessage">{_text(message.text, escape)}</td>\n'
        "      </tr>\n"
    )


def render_footer() -> str:
    return "    </table>\n  </body>\n</html>\n"


class HtmlDocument:
    """One day's HTML log bound to an open, writable handle.

    State machine: ``unopened -> open -> closed``.  Calling an operation in
    the wrong state raises ``HtmlDocumentStateError`` before anything is
    written.  The handle itself is owned (and closed) by the caller.
    """

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"

    def __init__(self, handle: TextIO, *, escape: bool = True) -> None:
        self._handle = handle
        self._escape = escape
        self._state = self.UNOPENED
        self._rows = 0

    @property
    def state(self) -> str:
        return self._state

    @property
    def row_count(self) -> int:
        return self._rows

    def open(self, room_name: str, day: date, extra_head: str) -> None:
        self._require(self.UNOPENED, "open")
        self._write(render_header(room_name, day, extra_head, escape=self._escape))
        self._state = self.OPEN

    def append_row(
        self,
        sequence_id: int,
        message: ChatMessage,
        badge: Badge,
        time_format: str,
    ) -> None:
        self._require(self.OPEN, "append_row")
        self._write(render_row(sequence_id, message, badge, time_format, escape=self._escape))
        self._rows += 1

    def close(self) -> None:
        self._require(self.OPEN, "close")
        # Closed even if the footer write fails; a partial footer is never rewritten.
        self._state = self.CLOSED
        self._write(render_footer())

    def _require(self, expected: str, operation: str) -> None:
        if self._state != expected:
            raise HtmlDocumentStateError(
                f"{operation}() requires document state '{expected}', got '{self._state}'"
            )

    def _write(self, text: str) -> None:
        self._handle.write(text)
        self._handle.flush()
        os.fsync(self._handle.fileno())

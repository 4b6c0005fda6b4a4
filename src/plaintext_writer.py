"""Plaintext transcript writer.

One line per message, verbatim (no escaping):

    14:05 alice | hello
"""

from __future__ import annotations

import os
from typing import TextIO

from models import ChatMessage


def format_line(message: ChatMessage, time_format: str) -> str:
    """Return the transcript line for *message* without a line terminator."""
    return f"{message.timestamp.strftime(time_format)} {message.sender_name} | {message.text}"


def append_line(handle: TextIO, message: ChatMessage, time_format: str) -> None:
    """Append one line and force it to stable storage before returning.

    I/O errors propagate to the caller.
    """
    handle.write(format_line(message, time_format) + "\n")
    handle.flush()
    os.fsync(handle.fileno())

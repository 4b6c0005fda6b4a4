"""Common test fixtures for transcript logger tests."""

from __future__ import annotations

from datetime import datetime
from html.parser import HTMLParser
from pathlib import Path

import pytest

from config import TranscriptConfig
from models import ChatMessage


VOID_TAGS = {"meta", "hr", "br", "link"}


class TagStackParser(HTMLParser):
    """Track open tags so tests can assert a document has no unclosed elements."""

    def __init__(self) -> None:
        super().__init__()
        self.stack: list[str] = []
        self.counts: dict[str, int] = {}
        self.row_ids: list[str] = []
        self.errors: list[str] = []

    def handle_starttag(self, tag, attrs):
        self.counts[tag] = self.counts.get(tag, 0) + 1
        if tag == "tr":
            self.row_ids.append(dict(attrs).get("id", ""))
        if tag not in VOID_TAGS:
            self.stack.append(tag)

    def handle_startendtag(self, tag, attrs):
        self.counts[tag] = self.counts.get(tag, 0) + 1

    def handle_endtag(self, tag):
        if not self.stack or self.stack[-1] != tag:
            self.errors.append(f"unexpected </{tag}> with stack {self.stack}")
            return
        self.stack.pop()


def parse_html(text: str) -> TagStackParser:
    parser = TagStackParser()
    parser.feed(text)
    parser.close()
    return parser


def make_message(**overrides) -> ChatMessage:
    defaults = dict(
        timestamp=datetime(2024, 1, 5, 14, 5),
        sender_name="alice",
        sender_role_flags=frozenset(),
        text="hello",
    )
    defaults.update(overrides)
    return ChatMessage(**defaults)


@pytest.fixture
def config(tmp_path: Path) -> TranscriptConfig:
    return TranscriptConfig(
        plaintext_log_dir=tmp_path / "plain",
        html_log_dir=tmp_path / "html",
        room_name="#test",
    )

"""Unit tests for transcript configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from config import ConfigError, TranscriptConfig, config_save, load_config
from html_document import DEFAULT_CSS


def _write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults(tmp_path: Path):
    cfg = load_config(
        _write_yaml(
            tmp_path / "cfg.yaml",
            "plaintext_log_dir: /tmp/plain\nhtml_log_dir: /tmp/html\nroom_name: '#python'\n",
        ),
        env={},
    )
    assert cfg.plaintext_log_dir == Path("/tmp/plain")
    assert cfg.time_log_format == "%H:%M"
    assert cfg.extra_head == DEFAULT_CSS
    assert cfg.rollover_interval_seconds == 5.0
    assert cfg.escape_html is True


def test_env_overrides_yaml(tmp_path: Path):
    path = _write_yaml(
        tmp_path / "cfg.yaml",
        "plaintext_log_dir: /a\nhtml_log_dir: /b\nroom_name: '#one'\n",
    )
    cfg = load_config(
        path,
        env={
            "TRANSCRIPT_ROOM": "#two",
            "TRANSCRIPT_TIME_FORMAT": "%H:%M:%S",
            "TRANSCRIPT_ROLLOVER_INTERVAL": "2.5",
            "TRANSCRIPT_ESCAPE_HTML": "false",
        },
    )
    assert cfg.room_name == "#two"
    assert cfg.time_log_format == "%H:%M:%S"
    assert cfg.rollover_interval_seconds == 2.5
    assert cfg.escape_html is False


def test_env_only():
    cfg = load_config(
        env={
            "TRANSCRIPT_PLAINTEXT_DIR": "/p",
            "TRANSCRIPT_HTML_DIR": "/h",
            "TRANSCRIPT_ROOM": "#env",
        }
    )
    assert cfg.html_log_dir == Path("/h")


@pytest.mark.parametrize(
    "env",
    [
        {"TRANSCRIPT_HTML_DIR": "/h", "TRANSCRIPT_ROOM": "#r"},
        {"TRANSCRIPT_PLAINTEXT_DIR": "/p", "TRANSCRIPT_ROOM": "#r"},
        {"TRANSCRIPT_PLAINTEXT_DIR": "/p", "TRANSCRIPT_HTML_DIR": "/h"},
    ],
)
def test_missing_required_setting(env):
    with pytest.raises(ConfigError):
        load_config(env=env)


def test_empty_directory_in_yaml_is_rejected(tmp_path: Path):
    path = _write_yaml(
        tmp_path / "cfg.yaml",
        "plaintext_log_dir: ''\nhtml_log_dir: /h\nroom_name: '#r'\n",
    )
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml", env={})


def test_non_mapping_yaml_rejected(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(_write_yaml(tmp_path / "cfg.yaml", "- a\n- b\n"), env={})


def test_save_then_load(tmp_path: Path):
    original = TranscriptConfig(
        plaintext_log_dir=tmp_path / "plain",
        html_log_dir=tmp_path / "html",
        room_name="#ruby",
        extra_head="<style></style>",
    )
    path = tmp_path / "conf" / "transcript.yaml"
    config_save(path, original)
    assert load_config(path, env={}) == original

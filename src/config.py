"""Transcript logger configuration.

Settings come from an optional YAML file, overridden by environment
variables, and are validated into ``TranscriptConfig``.

YAML keys mirror the model fields::

    plaintext_log_dir: /var/log/chat/plain
    html_log_dir: /var/log/chat/html
    room_name: "#python"
    time_log_format: "%H:%M"
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from html_document import DEFAULT_CSS


ENV_OVERRIDES: dict[str, str] = {
    "TRANSCRIPT_PLAINTEXT_DIR": "plaintext_log_dir",
    "TRANSCRIPT_HTML_DIR": "html_log_dir",
    "TRANSCRIPT_ROOM": "room_name",
    "TRANSCRIPT_TIME_FORMAT": "time_log_format",
    "TRANSCRIPT_ROLLOVER_INTERVAL": "rollover_interval_seconds",
    "TRANSCRIPT_ESCAPE_HTML": "escape_html",
}


class ConfigError(ValueError):
    """Required settings are missing or invalid."""


class TranscriptConfig(BaseModel):
    plaintext_log_dir: Path
    html_log_dir: Path
    room_name: str = Field(min_length=1)
    time_log_format: str = "%H:%M"
    extra_head: str = DEFAULT_CSS
    rollover_interval_seconds: float = Field(default=5.0, gt=0)
    # False reproduces raw (unescaped) nick/message markup in HTML logs.
    escape_html: bool = True

    @field_validator("plaintext_log_dir", "html_log_dir", mode="before")
    @classmethod
    def _require_directory(cls, v: Any) -> Any:
        if v is None or not str(v).strip():
            raise ValueError("log directory must not be empty")
        return v


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> TranscriptConfig:
    """Load YAML settings from *path* (optional) and apply env overrides.

    Raises:
        FileNotFoundError: If *path* is given but does not exist.
        ConfigError: If the merged settings do not validate.
    """
    env = os.environ if env is None else env
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        data.update(loaded or {})

    for env_name, field_name in ENV_OVERRIDES.items():
        value = (env.get(env_name) or "").strip()
        if value:
            data[field_name] = value

    try:
        return TranscriptConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid transcript configuration: {e}") from e


def config_save(path: Path, config: TranscriptConfig) -> None:
    """Write *config* as YAML, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

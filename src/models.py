"""Data models (Pydantic) for the chat transcript logger.

Defines the structures passed between the host chat layer and the logger:
- ChatMessage: one room message as delivered by the host
- RoleFlag: channel permission flags that carry a display badge
- Badge: display classification rendered next to a sender's name
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# Flags that map to a badge; hosts may send others, which are kept but ignored.
RoleFlag = Literal["operator", "half-operator", "voiced"]


class Badge(str, Enum):
    """Display badge; the value is the CSS class fragment used in HTML logs."""

    OPERATOR = "opped"
    HALF_OPERATOR = "halfopped"
    VOICED = "voiced"
    NONE = ""


class ChatMessage(BaseModel):
    """A single room message (immutable, consumed once by LogSession.record)."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    sender_name: str
    sender_role_flags: frozenset[str] = Field(default_factory=frozenset)
    text: str

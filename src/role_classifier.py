"""Sender role → display badge classification.

A sender may hold several channel flags at once; only the highest one is
shown: operator > half-operator > voiced > none.
"""

from __future__ import annotations

from typing import Iterable

from models import Badge, RoleFlag


_PRECEDENCE: tuple[tuple[RoleFlag, Badge], ...] = (
    ("operator", Badge.OPERATOR),
    ("half-operator", Badge.HALF_OPERATOR),
    ("voiced", Badge.VOICED),
)


def classify(role_flags: Iterable[str]) -> Badge:
    """Return the single badge for *role_flags*. Unknown flags are ignored."""
    flags = set(role_flags or ())
    for flag, badge in _PRECEDENCE:
        if flag in flags:
            return badge
    return Badge.NONE

"""Unit tests for role flag → badge classification."""

from __future__ import annotations

import pytest

from models import Badge
from role_classifier import classify


@pytest.mark.parametrize(
    "flags, expected",
    [
        ({"operator", "half-operator", "voiced"}, Badge.OPERATOR),
        ({"operator", "half-operator"}, Badge.OPERATOR),
        ({"operator", "voiced"}, Badge.OPERATOR),
        ({"half-operator", "voiced"}, Badge.HALF_OPERATOR),
        ({"half-operator"}, Badge.HALF_OPERATOR),
        ({"voiced"}, Badge.VOICED),
        (set(), Badge.NONE),
    ],
)
def test_highest_flag_wins(flags, expected):
    assert classify(flags) is expected


def test_unknown_flags_are_ignored():
    assert classify({"founder", "bot"}) is Badge.NONE
    assert classify({"founder", "voiced"}) is Badge.VOICED


def test_accepts_none_and_frozenset():
    assert classify(None) is Badge.NONE
    assert classify(frozenset({"operator"})) is Badge.OPERATOR


def test_badge_values_are_css_classes():
    assert [b.value for b in Badge] == ["opped", "halfopped", "voiced", ""]

"""
Unit tests for the partial-update sentinel.
"""

import copy

from core.sentinels import MISSING


def test_missing_is_falsy_and_distinct_from_none():
    assert not MISSING
    assert MISSING is not None
    assert MISSING != None  # noqa: E711


def test_missing_survives_copies():
    assert copy.copy(MISSING) is MISSING
    assert copy.deepcopy({"room_id": MISSING})["room_id"] is MISSING


def test_missing_repr():
    assert repr(MISSING) == "MISSING"

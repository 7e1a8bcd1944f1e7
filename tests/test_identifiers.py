from __future__ import annotations

import pytest

from qr_fixtures.common.exceptions import ValidationError
from qr_fixtures.devices.identifiers import (
    explicit_device_id,
    is_auto,
    leading_number,
    normalize_token,
    sequential_device_id,
)

PREFIX = "DUMMY-BIN"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("7", "DUMMY-BIN-007"),
        ("0", "DUMMY-BIN-000"),
        ("999", "DUMMY-BIN-999"),
        ("007", "DUMMY-BIN-007"),
        (" 12 ", "DUMMY-BIN-012"),
        ("+5", "DUMMY-BIN-005"),
        ("12ab", "DUMMY-BIN-012"),
        ("7.5", "DUMMY-BIN-007"),
        ("-0", "DUMMY-BIN-000"),
        ("42 west", "DUMMY-BIN-042"),
    ],
)
def test_numeric_tokens_are_zero_padded(token, expected):
    assert explicit_device_id(PREFIX, token) == expected


def test_every_numeric_token_in_range_pads_to_three_digits():
    for value in range(0, 1000):
        assert explicit_device_id(PREFIX, str(value)).endswith(f"-{value:03d}")


@pytest.mark.parametrize("token", ["1000", "-1", "123456", "1000abc", "-5B", "0001000"])
def test_numeric_tokens_out_of_range_are_rejected(token):
    with pytest.raises(ValidationError) as excinfo:
        explicit_device_id(PREFIX, token)
    assert excinfo.value.token == token


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("lobby", "DUMMY-BIN-LOBBY"),
        ("A1", "DUMMY-BIN-A1"),
        ("B12", "DUMMY-BIN-B12"),
        ("\u0663", "DUMMY-BIN-\u0663"),
        ("  west wing ", "DUMMY-BIN-WEST WING"),
    ],
)
def test_other_tokens_are_used_verbatim_after_normalisation(token, expected):
    assert explicit_device_id(PREFIX, token) == expected


@pytest.mark.parametrize("token", [None, "", "   ", "AUTO", "auto", " Auto "])
def test_auto_sentinels(token):
    assert is_auto(token)


def test_auto_must_match_exactly():
    assert not is_auto("AUTOMATIC")
    assert normalize_token(" automatic ") == "AUTOMATIC"


def test_sequential_ids():
    assert sequential_device_id(PREFIX, 1) == "DUMMY-BIN-001"
    assert sequential_device_id("BIN", 1234) == "BIN-1234"


@pytest.mark.parametrize("token", ["9" * 5000, "+" + "1" * 10000, "-" + "9" * 4301])
def test_huge_numeric_tokens_are_rejected_as_out_of_range(token):
    with pytest.raises(ValidationError):
        explicit_device_id(PREFIX, token)


def test_long_zero_padding_still_resolves():
    assert explicit_device_id(PREFIX, "0" * 5000 + "42") == "DUMMY-BIN-042"


@pytest.mark.parametrize(
    ("token", "expected"),
    [("12AB", 12), ("7.5", 7), ("-3x", -3), ("abc", None), ("", None), ("1" * 5000, 1000)],
)
def test_leading_number(token, expected):
    assert leading_number(token) == expected

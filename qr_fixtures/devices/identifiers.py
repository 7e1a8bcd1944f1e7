"""Device identifier tokens.

Operators type ``AUTO`` (or nothing) for the next sequential id, text starting
with a number in ``[0, 999]`` for a padded id, or any other text to use it as-is.
"""

from __future__ import annotations

import re

from qr_fixtures.common.exceptions import ValidationError

AUTO_TOKEN = "AUTO"
MIN_NUMERIC_ID = 0
MAX_NUMERIC_ID = 999

# ASCII digits only; "12AB" and "7.5" read as 12 and 7
_LEADING_INT_RE = re.compile(r"^([+-]?)([0-9]+)")


def normalize_token(token: str | None) -> str:
    return (token or "").strip().upper()


def is_auto(token: str | None) -> bool:
    return normalize_token(token) in ("", AUTO_TOKEN)


def format_device_id(prefix: str, suffix: str) -> str:
    return f"{prefix}-{suffix}"


def pad_number(value: int) -> str:
    return f"{value:03d}"


def sequential_device_id(prefix: str, sequence: int) -> str:
    return format_device_id(prefix, pad_number(sequence))


def leading_number(token: str) -> int | None:
    """Return the integer a token starts with, or None when it has none.

    Values too long to matter are clamped to ``MAX_NUMERIC_ID + 1`` so the
    range check rejects them without converting thousands of digits.
    """
    match = _LEADING_INT_RE.match(token)
    if match is None:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(MAX_NUMERIC_ID)):
        value = MAX_NUMERIC_ID + 1
    else:
        value = int(digits)
    return -value if sign == "-" else value


def explicit_device_id(prefix: str, token: str) -> str:
    """Resolve a non-AUTO token to a device identifier.

    A token that starts with an integer is numeric; trailing text is ignored.

    Raises:
        ValidationError: numeric token outside ``[0, 999]``.
    """
    normalized = normalize_token(token)
    value = leading_number(normalized)
    if value is None:
        return format_device_id(prefix, normalized)
    if value < MIN_NUMERIC_ID or value > MAX_NUMERIC_ID:
        raise ValidationError(
            f"Device ID number must be between {MIN_NUMERIC_ID} and {MAX_NUMERIC_ID}",
            token=token,
        )
    return format_device_id(prefix, pad_number(value))


__all__ = [
    "AUTO_TOKEN",
    "MAX_NUMERIC_ID",
    "MIN_NUMERIC_ID",
    "explicit_device_id",
    "format_device_id",
    "is_auto",
    "leading_number",
    "normalize_token",
    "pad_number",
    "sequential_device_id",
]

"""Shared helpers and the exception hierarchy."""

from qr_fixtures.common.exceptions import (
    DuplicateDeviceError,
    EncryptionError,
    FixtureError,
    ScanNotEncodedError,
    ValidationError,
)

__all__ = [
    "DuplicateDeviceError",
    "EncryptionError",
    "FixtureError",
    "ScanNotEncodedError",
    "ValidationError",
]

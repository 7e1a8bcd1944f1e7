"""Exception hierarchy for the QR fixture generator."""

from __future__ import annotations


class FixtureError(Exception):
    """Base error for fixture generation."""

    pass


class ValidationError(FixtureError):
    """A requested device identifier was rejected."""

    def __init__(self, message: str, token: str | None = None):
        self.token = token
        super().__init__(message)


class DuplicateDeviceError(ValidationError):
    """The resolved device identifier is already registered."""

    def __init__(self, device_id: str, token: str | None = None):
        self.device_id = device_id
        super().__init__(f"Device {device_id} already exists", token=token)


class EncryptionError(FixtureError):
    """The cipher primitive failed or was configured with bad key material."""

    pass


class ScanNotEncodedError(FixtureError):
    """The device has no encoded scan payload for its current unique code."""

    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(f"Device {device_id} has no encoded scan payload")

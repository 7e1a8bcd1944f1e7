"""Public schema exports for the QR fixture generator."""

from .payloads import DEFAULT_DEVICE_TYPE, RegisterPayload, ScanPayload

__all__ = ["DEFAULT_DEVICE_TYPE", "RegisterPayload", "ScanPayload"]

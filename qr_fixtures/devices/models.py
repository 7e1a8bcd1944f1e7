"""In-memory device records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fixture_schemas.payloads import RegisterPayload, ScanPayload


class DeviceState(str, Enum):
    CREATED = "created"
    SCAN_ENCODED = "scan-encoded"


@dataclass
class Device:
    """A simulated smart bin.

    ``scan_payload.unique_code`` mirrors ``unique_code``; the registry
    re-synchronises it before every encode.
    """

    device_id: str
    index: int
    unique_code: int
    register_payload: RegisterPayload
    scan_payload: ScanPayload
    state: DeviceState = DeviceState.CREATED
    encoded_scan: str | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "device_id" and "device_id" in self.__dict__:
            raise AttributeError("device_id is immutable")
        super().__setattr__(name, value)

    @property
    def register_json(self) -> str:
        return self.register_payload.to_json()

    def mark_scan_encoded(self, encoded: str) -> None:
        self.encoded_scan = encoded
        self.state = DeviceState.SCAN_ENCODED

    def invalidate_scan(self) -> None:
        self.encoded_scan = None
        self.state = DeviceState.CREATED


__all__ = ["Device", "DeviceState"]

"""Request/response models for the fixture HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from qr_fixtures.devices.models import Device, DeviceState


class CreateDeviceRequest(BaseModel):
    device_id: Optional[str] = Field(
        default="AUTO",
        description="AUTO/empty for the next sequential id, 0-999 for a padded id, or any text",
    )


class DeviceResponse(BaseModel):
    index: int
    device_id: str
    unique_code: int
    state: DeviceState
    register_payload: str = Field(..., description="Plain REGISTER JSON")
    scan_payload: Optional[str] = Field(
        default=None, description="base64(IV || AES-CBC ciphertext) of the SCAN JSON"
    )

    @classmethod
    def from_device(cls, device: Device) -> "DeviceResponse":
        return cls(
            index=device.index,
            device_id=device.device_id,
            unique_code=device.unique_code,
            state=device.state,
            register_payload=device.register_json,
            scan_payload=device.encoded_scan,
        )


class ScanRefreshResponse(BaseModel):
    device_id: str
    unique_code: int
    scan_payload: str


class ErrorResponse(BaseModel):
    status: str = "error"
    error_code: str
    message: str
    device_id: Optional[str] = None


__all__ = [
    "CreateDeviceRequest",
    "DeviceResponse",
    "ErrorResponse",
    "ScanRefreshResponse",
]

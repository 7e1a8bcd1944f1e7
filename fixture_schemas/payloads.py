"""QR payload models.

Field order and aliases mirror the JSON the firmware emits, so
``model_dump_json(by_alias=True)`` is the wire text byte for byte.
"""

from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

DEFAULT_DEVICE_TYPE = "SMART_BIN"


class RegisterPayload(BaseModel):
    """Plaintext REGISTER message announcing a device and its type."""

    device_id: str = Field(alias="deviceId")
    action: Literal["REGISTER"] = "REGISTER"
    type: str = DEFAULT_DEVICE_TYPE
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True, "populate_by_name": True}

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ScanPayload(BaseModel):
    """SCAN message; always transmitted encrypted.

    ``unique_code`` is the only field that changes after creation.
    """

    device_id: str = Field(alias="deviceId")
    type: str = DEFAULT_DEVICE_TYPE
    action: Literal["SCAN"] = "SCAN"
    unique_code: int = Field(alias="uniqueCode", ge=0)

    model_config = {"populate_by_name": True, "validate_assignment": True}

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


__all__ = ["DEFAULT_DEVICE_TYPE", "RegisterPayload", "ScanPayload"]

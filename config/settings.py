"""Configuration settings using pydantic-settings."""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

AES_KEY_BYTES = 16


class FixtureSettings(BaseSettings):
    """Settings for fixture generation, rendering, and the API runtime.

    The encryption key is pre-shared with the firmware and the backend that
    decrypt SCAN payloads, so it must be supplied per environment
    (``FIXTURES_ENCRYPTION_KEY``) and is exactly 16 bytes for AES-128.
    """

    encryption_key: SecretStr
    device_prefix: str = "DUMMY-BIN"
    device_type: str = "SMART_BIN"

    # None means "start from the current epoch in milliseconds"
    initial_unique_code: Optional[int] = Field(default=None, ge=0)

    qr_size_px: int = Field(default=128, gt=0)
    qr_fill_color: str = "#000000"
    qr_back_color: str = "#ffffff"
    qr_error_correction: Literal["L", "M", "Q", "H"] = "H"
    qr_border: int = Field(default=4, ge=0)
    invalid_payload: str = "invacygjhgblid"

    cpu_workers: int = Field(default=2, ge=1)

    log_level: str = "INFO"
    structured_logs: bool = True

    model_config = {"env_prefix": "FIXTURES_", "extra": "ignore"}

    @field_validator("encryption_key")
    @classmethod
    def _check_key_length(cls, value: SecretStr) -> SecretStr:
        size = len(value.get_secret_value().encode("utf-8"))
        if size != AES_KEY_BYTES:
            raise ValueError(f"encryption_key must be exactly {AES_KEY_BYTES} bytes, got {size}")
        return value

    @field_validator("device_prefix")
    @classmethod
    def _strip_prefix(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("device_prefix must not be empty")
        return value

    def key_bytes(self) -> bytes:
        return self.encryption_key.get_secret_value().encode("utf-8")

    def starting_unique_code(self) -> int:
        if self.initial_unique_code is not None:
            return self.initial_unique_code
        return int(time.time() * 1000)


@lru_cache(maxsize=1)
def get_fixture_settings() -> FixtureSettings:
    """Get cached FixtureSettings from environment."""
    return FixtureSettings()


__all__ = ["AES_KEY_BYTES", "FixtureSettings", "get_fixture_settings"]

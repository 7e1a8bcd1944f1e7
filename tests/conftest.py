from __future__ import annotations

import json
import os
import threading
from typing import Any

import pytest

os.environ.setdefault("FIXTURES_SKIP_DOTENV", "1")

from config.settings import FixtureSettings  # noqa: E402
from qr_fixtures.common.exceptions import EncryptionError  # noqa: E402
from qr_fixtures.devices.adapters import AesCbcCipherAdapter  # noqa: E402
from qr_fixtures.devices.registry import DeviceRegistry  # noqa: E402

TEST_KEY = "0123456789abcdef"
INITIAL_CODE = 1000


class FailingCipher:
    """Cipher whose first ``failures`` encode calls raise EncryptionError."""

    def __init__(self, inner: AesCbcCipherAdapter, failures: int = 1):
        self._inner = inner
        self.failures = failures

    def encode(self, record: Any) -> str:
        if self.failures > 0:
            self.failures -= 1
            raise EncryptionError("cipher primitive unavailable")
        return self._inner.encode(record)

    def decode(self, encoded: str) -> str:
        return self._inner.decode(encoded)


class GatedCipher:
    """Cipher that can hold one encode call until released."""

    def __init__(self, inner: AesCbcCipherAdapter):
        self._inner = inner
        self._armed = False
        self.entered = threading.Event()
        self.released = threading.Event()

    def arm(self) -> None:
        self._armed = True

    def encode(self, record: Any) -> str:
        if self._armed:
            self._armed = False
            self.entered.set()
            self.released.wait(timeout=5)
        return self._inner.encode(record)

    def decode(self, encoded: str) -> str:
        return self._inner.decode(encoded)


class RecordingRenderer:
    def __init__(self):
        self.rendered: list[str] = []

    def render(self, text: str) -> bytes:
        self.rendered.append(text)
        return b"PNG:" + text.encode("utf-8")


def decode_scan(cipher: AesCbcCipherAdapter, encoded: str) -> dict:
    return json.loads(cipher.decode(encoded))


@pytest.fixture
def settings() -> FixtureSettings:
    return FixtureSettings(
        encryption_key=TEST_KEY,
        initial_unique_code=INITIAL_CODE,
        structured_logs=False,
    )


@pytest.fixture
def cipher() -> AesCbcCipherAdapter:
    return AesCbcCipherAdapter(TEST_KEY)


@pytest.fixture
def registry(cipher) -> DeviceRegistry:
    return DeviceRegistry(cipher, initial_unique_code=INITIAL_CODE)

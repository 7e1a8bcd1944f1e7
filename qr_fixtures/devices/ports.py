"""Ports/interfaces for payload encryption and QR rendering.

The registry only depends on these, so tests and alternative backends can
swap implementations without touching device bookkeeping.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PayloadCipherPort(Protocol):
    """Abstraction for turning a record into a transport-ready string."""

    def encode(self, record: Any) -> str:
        """Return base64 text of ``IV || ciphertext`` for the record's JSON."""

    def decode(self, encoded: str) -> str:
        """Return the JSON text an encoded payload was produced from."""


@runtime_checkable
class QrRendererPort(Protocol):
    """Abstraction for the visual-code library."""

    def render(self, text: str) -> bytes:
        """Return a PNG image encoding ``text``."""


__all__ = ["PayloadCipherPort", "QrRendererPort"]

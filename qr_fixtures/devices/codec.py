"""Text encodings shared by the cipher adapter and its receiving side.

Wire frame: ``base64(IV[16] || AES-CBC ciphertext)``.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel

from qr_fixtures.common.exceptions import EncryptionError

IV_BYTES = 16
BLOCK_BYTES = 16


def canonical_json(record: Any) -> str:
    """Serialise a record to compact JSON, keeping key insertion order.

    Payload models serialise through their aliases so the text matches the
    firmware's field names.
    """
    if isinstance(record, BaseModel):
        return record.model_dump_json(by_alias=True)
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def frame(iv: bytes, ciphertext: bytes) -> str:
    if len(iv) != IV_BYTES:
        raise EncryptionError(f"IV must be {IV_BYTES} bytes, got {len(iv)}")
    return base64.b64encode(iv + ciphertext).decode("ascii")


def unframe(encoded: str) -> tuple[bytes, bytes]:
    """Split an encoded payload into ``(iv, ciphertext)``."""
    try:
        blob = base64.b64decode(encoded.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncryptionError("Encoded payload is not valid base64") from exc
    ciphertext = blob[IV_BYTES:]
    if len(blob) < IV_BYTES + BLOCK_BYTES or len(ciphertext) % BLOCK_BYTES:
        raise EncryptionError(f"Encoded payload has invalid length {len(blob)}")
    return blob[:IV_BYTES], ciphertext


__all__ = ["BLOCK_BYTES", "IV_BYTES", "canonical_json", "frame", "unframe"]

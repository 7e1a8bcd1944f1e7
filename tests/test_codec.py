from __future__ import annotations

import base64

import pytest

from fixture_schemas.payloads import RegisterPayload, ScanPayload
from qr_fixtures.common.exceptions import EncryptionError
from qr_fixtures.devices.codec import canonical_json, frame, unframe


def test_scan_payload_wire_text():
    payload = ScanPayload(device_id="DUMMY-BIN-001", unique_code=42)
    assert canonical_json(payload) == (
        '{"deviceId":"DUMMY-BIN-001","type":"SMART_BIN","action":"SCAN","uniqueCode":42}'
    )


def test_register_payload_wire_text():
    payload = RegisterPayload(device_id="DUMMY-BIN-001")
    expected = '{"deviceId":"DUMMY-BIN-001","action":"REGISTER","type":"SMART_BIN","metadata":{}}'
    assert payload.to_json() == expected
    assert canonical_json(payload) == expected


def test_register_payload_is_frozen():
    payload = RegisterPayload(device_id="DUMMY-BIN-001")
    with pytest.raises(Exception):
        payload.device_id = "OTHER"


def test_plain_records_are_compact_and_keep_unicode():
    assert canonical_json({"b": 1, "a": [1, 2], "name": "Zürich"}) == '{"b":1,"a":[1,2],"name":"Zürich"}'


def test_frame_prefixes_iv():
    iv = bytes(range(16))
    ciphertext = b"\xaa" * 32
    encoded = frame(iv, ciphertext)
    assert base64.b64decode(encoded) == iv + ciphertext
    assert unframe(encoded) == (iv, ciphertext)


def test_frame_rejects_short_iv():
    with pytest.raises(EncryptionError):
        frame(b"\x00" * 8, b"\x00" * 16)


@pytest.mark.parametrize(
    "encoded",
    [
        "not base64!!",
        base64.b64encode(b"\x00" * 16).decode(),
        base64.b64encode(b"\x00" * 40).decode(),
    ],
)
def test_unframe_rejects_malformed_payloads(encoded):
    with pytest.raises(EncryptionError):
        unframe(encoded)

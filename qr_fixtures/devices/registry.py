"""In-memory device registry and scan-payload state machine.

All mutation goes through ``create_device`` and ``refresh_scan``, which run on
the event loop thread. Only the cipher call is handed to a worker thread, and
the scan payload's code is fixed before that hand-off.

Unique codes come from one shared counter that always holds the next unissued
value, so codes are strictly increasing across every device in the session.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Iterator

from config.settings import FixtureSettings
from fixture_schemas.payloads import DEFAULT_DEVICE_TYPE, RegisterPayload, ScanPayload
from observability.logging_config import get_logger
from observability.timing import timed
from qr_fixtures.common.exceptions import DuplicateDeviceError, EncryptionError
from qr_fixtures.devices.identifiers import explicit_device_id, is_auto, sequential_device_id
from qr_fixtures.devices.models import Device
from qr_fixtures.devices.ports import PayloadCipherPort
from qr_fixtures.infra.executors import run_blocking

logger = get_logger("qr_fixtures.registry")


class DeviceRegistry:
    """Owns the simulated devices plus the device-sequence and unique-code counters."""

    def __init__(
        self,
        cipher: PayloadCipherPort,
        *,
        initial_unique_code: int,
        prefix: str = "DUMMY-BIN",
        device_type: str = DEFAULT_DEVICE_TYPE,
        executor: Executor | None = None,
    ):
        if initial_unique_code < 0:
            raise ValueError("initial_unique_code must be non-negative")
        self._cipher = cipher
        self._prefix = prefix
        self._device_type = device_type
        self._executor = executor
        self._devices: dict[str, Device] = {}
        self._next_sequence = 1
        self._next_unique_code = initial_unique_code

    @classmethod
    def from_settings(
        cls,
        settings: FixtureSettings,
        cipher: PayloadCipherPort,
        executor: Executor | None = None,
    ) -> "DeviceRegistry":
        return cls(
            cipher,
            initial_unique_code=settings.starting_unique_code(),
            prefix=settings.device_prefix,
            device_type=settings.device_type,
            executor=executor,
        )

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def next_unique_code(self) -> int:
        return self._next_unique_code

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    @property
    def executor(self) -> Executor | None:
        return self._executor

    def get(self, device_id: str) -> Device | None:
        return self._devices.get(device_id)

    def devices(self) -> list[Device]:
        return list(self._devices.values())

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices())

    # =========================================================================
    # Entry points
    # =========================================================================

    async def create_device(self, requested_id: str | None = None) -> Device:
        """Register a device and encode its first scan payload.

        Raises:
            ValidationError: the token was rejected; nothing was mutated.
            EncryptionError: encoding failed after the device was registered.
                The device stays in ``created`` until a refresh succeeds.
        """
        device = self.register_device(requested_id)
        await self.encode_scan(device)
        return device

    def register_device(self, requested_id: str | None = None) -> Device:
        """Validate the token, then record the device without encoding."""
        device_id, next_sequence = self._resolve_device_id(requested_id)

        # Nothing above mutates state; everything below must not fail.
        self._next_sequence = next_sequence
        unique_code = self._issue_unique_code()
        device = Device(
            device_id=device_id,
            index=len(self._devices) + 1,
            unique_code=unique_code,
            register_payload=RegisterPayload(device_id=device_id, type=self._device_type),
            scan_payload=ScanPayload(
                device_id=device_id,
                type=self._device_type,
                unique_code=unique_code,
            ),
        )
        self._devices[device_id] = device

        logger.info(
            "device_created",
            extra={"device_id": device_id, "index": device.index, "unique_code": unique_code},
        )
        logger.debug(
            "register_payload_built",
            extra={"device_id": device_id, "register_payload": device.register_json},
        )
        return device

    async def refresh_scan(self, device_id: str) -> str | None:
        """Issue a new unique code for ``device_id`` and re-encode its scan payload.

        Unknown devices are ignored and ``None`` is returned.
        """
        device = self._devices.get(device_id)
        if device is None:
            logger.debug("scan_refresh_skipped", extra={"device_id": device_id})
            return None

        previous_code = device.unique_code
        device.unique_code = self._issue_unique_code()
        device.scan_payload.unique_code = device.unique_code
        device.invalidate_scan()

        logger.info(
            "scan_refreshed",
            extra={
                "device_id": device_id,
                "previous_code": previous_code,
                "unique_code": device.unique_code,
            },
        )
        return await self.encode_scan(device)

    async def encode_scan(self, device: Device) -> str:
        """Encrypt the device's current scan payload and store the result.

        A result is stored only if the device still carries the code that was
        encoded; a newer refresh may have landed while the cipher ran.
        """
        device.scan_payload.unique_code = device.unique_code
        code = device.unique_code
        snapshot = device.scan_payload.model_copy()

        try:
            with timed("scan_encode", {"device_id": device.device_id}):
                encoded = await run_blocking(self._executor, self._cipher.encode, snapshot)
        except EncryptionError:
            logger.error(
                "scan_encode_failed",
                exc_info=True,
                extra={"device_id": device.device_id, "unique_code": code},
            )
            raise

        if device.unique_code != code:
            logger.info(
                "scan_encode_stale",
                extra={
                    "device_id": device.device_id,
                    "encoded_code": code,
                    "unique_code": device.unique_code,
                },
            )
            return encoded

        device.mark_scan_encoded(encoded)
        logger.info("scan_encoded", extra={"device_id": device.device_id, "unique_code": code})
        return encoded

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_device_id(self, requested_id: str | None) -> tuple[str, int]:
        """Return the identifier to use and the device-sequence value that follows."""
        if is_auto(requested_id):
            sequence = self._next_sequence
            device_id = sequential_device_id(self._prefix, sequence)
            while device_id in self._devices:
                sequence += 1
                device_id = sequential_device_id(self._prefix, sequence)
            return device_id, sequence + 1

        device_id = explicit_device_id(self._prefix, requested_id or "")
        if device_id in self._devices:
            raise DuplicateDeviceError(device_id, token=requested_id)
        return device_id, self._next_sequence

    def _issue_unique_code(self) -> int:
        code = self._next_unique_code
        self._next_unique_code += 1
        return code


__all__ = ["DeviceRegistry"]

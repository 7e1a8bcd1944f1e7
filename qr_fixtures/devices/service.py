"""DeviceFixtureService wires the registry to the QR renderer.

Callers (HTTP routes, CLI) go through this service so that rendering only
happens after an encode has completed.
"""

from __future__ import annotations

from concurrent.futures import Executor

from config.settings import FixtureSettings
from qr_fixtures.common.exceptions import ScanNotEncodedError
from qr_fixtures.devices.adapters import AesCbcCipherAdapter, QrCodePngRenderer
from qr_fixtures.devices.models import Device, DeviceState
from qr_fixtures.devices.ports import PayloadCipherPort, QrRendererPort
from qr_fixtures.devices.registry import DeviceRegistry
from qr_fixtures.infra.executors import run_blocking


class DeviceFixtureService:
    """Create, refresh, and render simulated devices."""

    def __init__(
        self,
        registry: DeviceRegistry,
        renderer: QrRendererPort,
        cipher: PayloadCipherPort,
        invalid_payload: str = "invacygjhgblid",
    ):
        self._registry = registry
        self._renderer = renderer
        self._cipher = cipher
        self._invalid_payload = invalid_payload

    @classmethod
    def from_settings(
        cls, settings: FixtureSettings, executor: Executor | None = None
    ) -> "DeviceFixtureService":
        cipher = AesCbcCipherAdapter(settings.key_bytes())
        renderer = QrCodePngRenderer(
            size_px=settings.qr_size_px,
            fill_color=settings.qr_fill_color,
            back_color=settings.qr_back_color,
            error_correction=settings.qr_error_correction,
            border=settings.qr_border,
        )
        registry = DeviceRegistry.from_settings(settings, cipher, executor=executor)
        return cls(registry, renderer, cipher, invalid_payload=settings.invalid_payload)

    @property
    def registry(self) -> DeviceRegistry:
        return self._registry

    @property
    def cipher(self) -> PayloadCipherPort:
        return self._cipher

    @property
    def invalid_payload(self) -> str:
        return self._invalid_payload

    async def provision(self, requested_id: str | None = None) -> Device:
        return await self._registry.create_device(requested_id)

    async def refresh(self, device_id: str) -> str | None:
        return await self._registry.refresh_scan(device_id)

    def devices(self) -> list[Device]:
        return self._registry.devices()

    def get(self, device_id: str) -> Device | None:
        return self._registry.get(device_id)

    def decode(self, encoded: str) -> str:
        return self._cipher.decode(encoded)

    async def render_register(self, device: Device) -> bytes:
        # REGISTER is always plain JSON
        return await self._render(device.register_json)

    async def render_scan(self, device: Device) -> bytes:
        encoded = device.encoded_scan
        if device.state is not DeviceState.SCAN_ENCODED or encoded is None:
            raise ScanNotEncodedError(device.device_id)
        return await self._render(encoded)

    async def render_invalid(self) -> bytes:
        return await self._render(self._invalid_payload)

    async def _render(self, text: str) -> bytes:
        return await run_blocking(self._registry.executor, self._renderer.render, text)


__all__ = ["DeviceFixtureService"]

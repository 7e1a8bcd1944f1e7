"""Simulated devices: registry, payload cipher, and QR rendering.

Contains the in-memory registry and the adapters that materialise payloads.
"""

from qr_fixtures.devices.models import Device, DeviceState
from qr_fixtures.devices.registry import DeviceRegistry
from qr_fixtures.devices.service import DeviceFixtureService

__all__ = ["Device", "DeviceFixtureService", "DeviceRegistry", "DeviceState"]

"""Adapters for device ports."""

from qr_fixtures.devices.adapters.aes_cbc_cipher import AesCbcCipherAdapter
from qr_fixtures.devices.adapters.qrcode_renderer import QrCodePngRenderer

__all__ = ["AesCbcCipherAdapter", "QrCodePngRenderer"]

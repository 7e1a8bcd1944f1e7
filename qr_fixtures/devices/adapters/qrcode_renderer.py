"""PNG QR renderer backed by the ``qrcode`` library."""

from __future__ import annotations

import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.image.pil import PilImage

from qr_fixtures.devices.ports import QrRendererPort

_ERROR_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


class QrCodePngRenderer(QrRendererPort):
    """Render strings as fixed-size square PNG QR codes."""

    def __init__(
        self,
        size_px: int = 128,
        fill_color: str = "#000000",
        back_color: str = "#ffffff",
        error_correction: str = "H",
        border: int = 4,
    ):
        if error_correction not in _ERROR_LEVELS:
            raise ValueError(f"Unknown error correction level: {error_correction}")
        self.size_px = size_px
        self.fill_color = fill_color
        self.back_color = back_color
        self.error_correction = error_correction
        self.border = border

    def render(self, text: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=_ERROR_LEVELS[self.error_correction],
            box_size=10,
            border=self.border,
        )
        qr.add_data(text)
        qr.make(fit=True)
        img = qr.make_image(
            image_factory=PilImage,
            fill_color=self.fill_color,
            back_color=self.back_color,
        )
        # Nearest-neighbour keeps module edges sharp at the fixed output size
        pil_image = img.get_image().convert("RGB").resize(
            (self.size_px, self.size_px), Image.Resampling.NEAREST
        )

        buffer = io.BytesIO()
        pil_image.save(buffer, format="PNG")
        return buffer.getvalue()


__all__ = ["QrCodePngRenderer"]

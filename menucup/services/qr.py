"""
QR code rendering for public menu links.
"""

from io import BytesIO

import qrcode
from PIL import Image


class QRService:
    @staticmethod
    def generate_qr(
        text: str,
        size: int = 512,
        border: int = 4,
        color: str = "#000000",
        background: str = "#FFFFFF",
    ) -> bytes:
        """Render ``text`` as a square PNG QR code and return the bytes."""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=border,
        )
        qr.add_data(text)
        qr.make(fit=True)

        img = qr.make_image(fill_color=color, back_color=background).convert("RGB")
        img = img.resize((size, size), Image.Resampling.NEAREST)

        output = BytesIO()
        img.save(output, format="PNG")
        return output.getvalue()


qr_service = QRService()

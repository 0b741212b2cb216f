import base64
import io
import logging

import qrcode

logger = logging.getLogger(__name__)


class QRCodeError(Exception):
    pass


def generate_qr_code(url: str, box_size: int = 10, border: int = 1) -> str:
    """Render url as a PNG QR code and return it as a data URL"""
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=border,
        )
        qr.add_data(url)
        qr.make(fit=True)

        image = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except Exception as e:
        logger.error(f"QR code generation error: {e}")
        raise QRCodeError("Failed to generate QR code") from e

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"

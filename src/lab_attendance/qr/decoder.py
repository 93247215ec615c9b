from __future__ import annotations

from typing import Any, BinaryIO

from PIL import Image

from ..core.exceptions import InvalidPayloadError


def symbol_text(data: bytes) -> str:
    """Text of one decoded symbol; enrollments are UTF-8."""

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidPayloadError("Invalid QR code format") from e


def decode_payloads(image: Any) -> list[str]:
    """Decode every QR symbol in a PIL image or numpy frame into text.

    Raises InvalidPayloadError when a symbol does not carry UTF-8 text.
    """

    # pyzbar loads the zbar shared library on import; keep it off the import path
    # of modules that never decode.
    from pyzbar.pyzbar import ZBarSymbol, decode

    symbols = decode(image, symbols=[ZBarSymbol.QRCODE])
    return [symbol_text(s.data) for s in symbols]


def decode_image_file(stream: BinaryIO) -> list[str]:
    """Decode QR payloads from an uploaded image file."""

    img = Image.open(stream).convert("L")
    return decode_payloads(img)

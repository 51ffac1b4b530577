from __future__ import annotations

import io
import json
from typing import Optional

import qrcode
from PIL import Image

from ..roster.model import Person


def qr_payload(person: Person) -> str:
    """JSON payload printed on ID cards; `resolve_person` reads `student_id` first."""

    return json.dumps(
        {"student_id": person.external_code, "id": person.id, "name": person.display_name},
        separators=(",", ":"),
    )


def encode_person_qr(person: Person, *, box_size: int = 8, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(qr_payload(person))
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(data: bytes) -> Optional[str]:
    """Decode the first QR code in an uploaded camera frame, if any."""

    # pyzbar loads the native zbar library on import.
    from pyzbar.pyzbar import decode as pyzbar_decode

    img = Image.open(io.BytesIO(data)).convert("RGB")
    for symbol in pyzbar_decode(img):
        if symbol.data:
            return symbol.data.decode("utf-8").strip()
    return None

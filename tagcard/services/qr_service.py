"""QR payloads and images for a profile's share URL."""
from __future__ import annotations

import io

import qrcode
import qrcode.image.svg as qsvg
from PIL import Image
from qrcode.exceptions import DataOverflowError

from tagcard.domain.visibility import PublicView
from tagcard.services.errors import ArtifactGenerationError
from tagcard.services.vcard_service import build_vcard

QR_VARIANT_DYNAMIC = "dynamic"
QR_VARIANT_STATIC = "static"
QR_VARIANTS = (QR_VARIANT_DYNAMIC, QR_VARIANT_STATIC)

QR_BOX_SIZE = 10
QR_BORDER = 4


def qr_payload(view: PublicView, url: str, variant: str = QR_VARIANT_DYNAMIC) -> str:
    """
    ``dynamic`` encodes the share URL itself, so scans always reach the live
    profile. ``static`` freezes the current public view as a vCard that also
    carries the URL.
    """
    if variant == QR_VARIANT_STATIC:
        return build_vcard(view, profile_url=url)
    if variant != QR_VARIANT_DYNAMIC:
        raise ValueError(f"Unknown QR variant: {variant!r}")
    return url


def _qr(payload: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise ArtifactGenerationError(f"QR payload too large: {exc}") from exc
    return qr


def qr_image(payload: str, size: int | None = None):
    """PIL image of the QR code, optionally resized to ``size`` x ``size``."""
    img = _qr(payload).make_image(fill_color="black", back_color="white").convert("RGB")
    if size:
        img = img.resize((size, size), Image.NEAREST)
    return img


def qr_png(payload: str) -> bytes:
    buf = io.BytesIO()
    qr_image(payload).save(buf, format="PNG")
    return buf.getvalue()


def qr_svg(payload: str) -> bytes:
    buf = io.BytesIO()
    _qr(payload).make_image(image_factory=qsvg.SvgPathImage).save(buf)
    return buf.getvalue()

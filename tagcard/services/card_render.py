"""
Printable business card (85mm x 55mm) rendered with Pillow.

``render_card`` is the only suspension point: the avatar and the QR code are
loaded concurrently and fully decoded before anything is drawn, so the
raster never captures a half-loaded image. PNG and PDF exports are both
encoded from that same raster.
"""
from __future__ import annotations

import asyncio
import io
import ipaddress
import socket
from functools import lru_cache
from pathlib import Path
from typing import Awaitable, Callable, Optional
from urllib.parse import urlsplit

import httpx
from PIL import Image, ImageDraw, ImageFont, ImageOps

from tagcard.core.config import get_settings
from tagcard.core.utils import safe_filename
from tagcard.domain.visibility import PublicView
from tagcard.services.errors import ArtifactGenerationError
from tagcard.services.qr_service import qr_image

CARD_WIDTH_MM = 85
CARD_HEIGHT_MM = 55
PX_PER_MM = 12
CARD_SIZE = (CARD_WIDTH_MM * PX_PER_MM, CARD_HEIGHT_MM * PX_PER_MM)  # 1020 x 660
PDF_RESOLUTION = PX_PER_MM * 25.4  # 304.8 dpi keeps the page at exactly 85 x 55 mm

MARGIN = 48
AVATAR_SIZE = 160
QR_SIZE = 300
TEXT_MAX_WIDTH = CARD_SIZE[0] - QR_SIZE - MARGIN * 3

BACKGROUND = (255, 255, 255)
INK = (17, 17, 17)
MUTED = (96, 96, 96)
AVATAR_FILL = (34, 34, 34)
AVATAR_TEXT = (255, 255, 255)

UPLOAD_PREFIXES = ("/static/uploads/", "/uploads/")

AvatarLoader = Callable[[str], Awaitable[bytes]]


def _local_avatar_path(ref: str, uploads_dir: str) -> Path:
    rel = ref.split("?", 1)[0]
    for prefix in UPLOAD_PREFIXES:
        if rel.startswith(prefix):
            rel = rel[len(prefix):]
            break
    root = Path(uploads_dir).resolve()
    path = (root / rel.lstrip("/")).resolve()
    if root not in path.parents:
        raise ArtifactGenerationError(f"Avatar path outside uploads: {ref}")
    return path


def _is_public_address(value: str) -> bool:
    try:
        return ipaddress.ip_address(value.split("%", 1)[0]).is_global
    except ValueError:
        return False


async def _check_public_host(host: str) -> None:
    """Refuse hosts that are, or resolve to, loopback/private/link-local addresses."""
    if not host:
        raise ArtifactGenerationError("Avatar URL has no host")
    try:
        ipaddress.ip_address(host)
        addresses = [host]
    except ValueError:
        try:
            infos = await asyncio.to_thread(socket.getaddrinfo, host, None)
        except OSError as exc:
            raise ArtifactGenerationError(f"Avatar host does not resolve: {host}") from exc
        addresses = [info[4][0] for info in infos]
    if not addresses or not all(_is_public_address(a) for a in addresses):
        raise ArtifactGenerationError(f"Avatar host not allowed: {host}")


def _http_client(timeout: float) -> httpx.AsyncClient:
    # redirects stay unfollowed so every host contacted has passed _check_public_host
    return httpx.AsyncClient(timeout=timeout, follow_redirects=False)


async def _fetch_remote_avatar(ref: str, timeout: float, max_bytes: int) -> bytes:
    await _check_public_host(urlsplit(ref).hostname or "")
    async with _http_client(timeout) as client:
        async with client.stream("GET", ref) as resp:
            if resp.status_code != 200:
                raise ArtifactGenerationError(f"Avatar fetch returned HTTP {resp.status_code}")
            content_type = resp.headers.get("content-type", "").lower()
            if not content_type.startswith("image/"):
                raise ArtifactGenerationError(f"Avatar is not an image ({content_type or 'no content-type'})")
            declared = resp.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                raise ArtifactGenerationError(f"Avatar larger than {max_bytes} bytes")
            body = bytearray()
            async for chunk in resp.aiter_bytes():
                body.extend(chunk)
                if len(body) > max_bytes:
                    raise ArtifactGenerationError(f"Avatar larger than {max_bytes} bytes")
            return bytes(body)


async def load_avatar_bytes(ref: str) -> bytes:
    """Fetch avatar bytes from the object store (uploads dir) or over HTTP."""
    settings = get_settings()
    if ref.lower().startswith(("http://", "https://")):
        return await _fetch_remote_avatar(ref, settings.avatar_fetch_timeout, settings.avatar_max_bytes)
    path = _local_avatar_path(ref, settings.uploads_dir)
    if path.is_file() and path.stat().st_size > settings.avatar_max_bytes:
        raise ArtifactGenerationError(f"Avatar larger than {settings.avatar_max_bytes} bytes")
    return await asyncio.to_thread(path.read_bytes)


def _decode_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    image = ImageOps.exif_transpose(image)
    return image.convert("RGB")


@lru_cache(maxsize=16)
def _font(size: int):
    return ImageFont.load_default(size=size)


def _fit_text(draw: ImageDraw.ImageDraw, text: str, size: int, max_width: int, min_size: int = 18):
    """Shrink the font until text fits; below min_size, ellipsize instead."""
    while size > min_size and draw.textlength(text, font=_font(size)) > max_width:
        size -= 2
    font = _font(size)
    if draw.textlength(text, font=font) <= max_width:
        return text, font
    while text and draw.textlength(text + "...", font=font) > max_width:
        text = text[:-1]
    return text.rstrip() + "...", font


def _circle_mask(size: int) -> Image.Image:
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)
    return mask


def _title_line(view: PublicView) -> str:
    if view.job_title and view.company:
        return f"{view.job_title} at {view.company}"
    return view.job_title or view.company or ""


def _compose(view: PublicView, avatar: Optional[Image.Image], qr: Image.Image) -> Image.Image:
    card = Image.new("RGB", CARD_SIZE, BACKGROUND)
    draw = ImageDraw.Draw(card)

    # avatar, image or initials
    box = (MARGIN, MARGIN)
    if avatar is not None:
        face = ImageOps.fit(avatar, (AVATAR_SIZE, AVATAR_SIZE), Image.LANCZOS)
        card.paste(face, box, _circle_mask(AVATAR_SIZE))
    else:
        x, y = box
        draw.ellipse((x, y, x + AVATAR_SIZE - 1, y + AVATAR_SIZE - 1), fill=AVATAR_FILL)
        draw.text(
            (x + AVATAR_SIZE / 2, y + AVATAR_SIZE / 2),
            view.initials or "?",
            font=_font(64),
            fill=AVATAR_TEXT,
            anchor="mm",
        )

    y = MARGIN + AVATAR_SIZE + 28
    name, font = _fit_text(draw, view.display_name, 48, TEXT_MAX_WIDTH)
    draw.text((MARGIN, y), name, font=font, fill=INK)
    y += 62

    title = _title_line(view)
    if title:
        text, font = _fit_text(draw, title, 28, TEXT_MAX_WIDTH)
        draw.text((MARGIN, y), text, font=font, fill=MUTED)
        y += 40
    if view.location:
        text, font = _fit_text(draw, view.location, 24, TEXT_MAX_WIDTH)
        draw.text((MARGIN, y), text, font=font, fill=MUTED)
        y += 36

    y += 12
    for value in (view.email, view.phone, view.website):
        if not value or y > CARD_SIZE[1] - MARGIN - 24:
            continue
        text, font = _fit_text(draw, value, 24, TEXT_MAX_WIDTH)
        draw.text((MARGIN, y), text, font=font, fill=INK)
        y += 34

    qr_x = CARD_SIZE[0] - MARGIN - QR_SIZE
    qr_y = (CARD_SIZE[1] - QR_SIZE) // 2
    card.paste(qr, (qr_x, qr_y))
    return card


async def render_card(
    view: PublicView,
    url: str,
    *,
    avatar_loader: AvatarLoader | None = None,
) -> Image.Image:
    """Load every embedded image, then rasterize the card."""
    loader = avatar_loader or load_avatar_bytes

    async def _avatar() -> Optional[Image.Image]:
        if not view.avatar_url:
            return None
        try:
            data = await loader(view.avatar_url)
            return await asyncio.to_thread(_decode_image, data)
        except ArtifactGenerationError:
            raise
        except Exception as exc:
            raise ArtifactGenerationError(f"Could not load avatar: {exc}") from exc

    avatar, qr = await asyncio.gather(_avatar(), asyncio.to_thread(qr_image, url, QR_SIZE))
    try:
        return await asyncio.to_thread(_compose, view, avatar, qr)
    except (OSError, ValueError) as exc:
        raise ArtifactGenerationError(f"Could not draw card: {exc}") from exc


def card_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG", optimize=True)
    except (OSError, ValueError) as exc:
        raise ArtifactGenerationError(f"PNG encoding failed: {exc}") from exc
    return buf.getvalue()


def card_pdf(image: Image.Image) -> bytes:
    """Single landscape page, 85mm x 55mm, the raster full-bleed."""
    buf = io.BytesIO()
    try:
        image.convert("RGB").save(buf, format="PDF", resolution=PDF_RESOLUTION, title="Business card")
    except (OSError, ValueError) as exc:
        raise ArtifactGenerationError(f"PDF encoding failed: {exc}") from exc
    return buf.getvalue()


def card_filename(view: PublicView, extension: str) -> str:
    return safe_filename(view.full_name, f"_card.{extension}")

"""
Utility helpers shared across routers/services.
"""

import re
from typing import Optional
from urllib.parse import urlencode

from .config import get_settings


def absolute_url(path: str, base: Optional[str] = None) -> str:
    """
    Turn a relative path into an absolute URL using PUBLIC_BASE_URL.
    """
    settings = get_settings()
    base_url = (base or settings.public_base_url).rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


def share_url(public_id: str, preset: Optional[str] = None, base: Optional[str] = None) -> str:
    """Canonical public URL of a profile: <origin>/p/<public_id>[?preset=<name>]."""
    url = absolute_url(f"/p/{public_id}", base)
    if preset:
        url += "?" + urlencode({"preset": preset})
    return url


def safe_filename(name: str, suffix: str) -> str:
    """Whitespace becomes underscores: "Jane Doe" -> "Jane_Doe<suffix>"."""
    stem = re.sub(r"\s", "_", (name or "").strip()) or "profile"
    stem = stem.replace('"', "").replace("/", "_").replace("\\", "_")
    return f"{stem}{suffix}"

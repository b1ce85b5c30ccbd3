"""vCard 3.0 export of a public view."""
from __future__ import annotations

import re

from tagcard.core.utils import safe_filename
from tagcard.domain.visibility import PublicView

VCARD_MEDIA_TYPE = "text/vcard"


def escape_text(value: str) -> str:
    """RFC 2426 text escaping."""
    v = (value or "").replace("\\", "\\\\")
    v = v.replace(";", "\\;").replace(",", "\\,")
    return v.replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")


def single_line(value: str | None) -> str:
    """Drop CR/LF (and the whitespace around them) so a value cannot start a new property."""
    return re.sub(r"\s*[\r\n]+\s*", "", value or "").strip()


def build_vcard(view: PublicView, profile_url: str | None = None) -> str:
    """
    Only fields present on the view produce a line; absent ones are skipped
    rather than left blank. ``profile_url`` adds a second URL line pointing
    at the public page (used by the static QR snapshot).
    """
    name = escape_text(view.full_name)
    optional = [
        ("TITLE", escape_text(view.job_title or "")),
        ("ORG", escape_text(view.company or "")),
        ("EMAIL", single_line(view.email)),
        ("TEL", single_line(view.phone)),
        ("URL", single_line(view.website)),
    ]
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{name}",
        f"N:{name};;;",
    ]
    lines.extend(f"{key}:{value}" for key, value in optional if value)
    if view.location:
        lines.append(f"ADR:;;{escape_text(view.location)};;;;")
    profile_url = single_line(profile_url)
    if profile_url and profile_url != view.website:
        lines.append(f"URL:{profile_url}")
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


def vcard_filename(view: PublicView) -> str:
    return safe_filename(view.full_name, ".vcf")

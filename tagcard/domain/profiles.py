"""Plain records handed from the repository to the services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

TAG_KIND_LIKE = "like"
TAG_KIND_DISLIKE = "dislike"
TAG_KINDS = (TAG_KIND_LIKE, TAG_KIND_DISLIKE)


@dataclass(frozen=True)
class ProfileRecord:
    id: str
    public_id: str
    full_name: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    short_bio: Optional[str] = None
    long_bio: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    show_contact_info: bool = True
    show_social_links: bool = True
    visibility_preset: Optional[str] = None
    view_count: int = 0


@dataclass(frozen=True)
class TagRecord:
    name: str
    kind: str = TAG_KIND_LIKE
    id: Optional[int] = None


@dataclass(frozen=True)
class SocialLinkRecord:
    platform: str
    url: str
    id: Optional[int] = None


def normalize_tag_kind(value: str | None) -> str:
    kind = (value or "").strip().lower()
    if not kind:
        return TAG_KIND_LIKE
    if kind not in TAG_KINDS:
        raise ValueError(f"Unknown tag kind: {value!r}")
    return kind

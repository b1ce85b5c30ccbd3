"""
Visibility rules: which parts of a profile an anonymous visitor may see.

``project`` is the only way a ``PublicView`` gets built, and a ``PublicView``
is the only shape renderers and artifact generators receive. Contact data
can therefore only leak through a bug in this module.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit

from .profiles import (
    TAG_KIND_DISLIKE,
    TAG_KIND_LIKE,
    ProfileRecord,
    SocialLinkRecord,
    TagRecord,
)

PRESET_MINIMAL = "minimal"
PRESET_FRIEND = "friend"
PRESET_WORK = "work"
PRESET_PUBLIC = "public"

# preset -> (contact info allowed, social links allowed); narrowed against the owner's config
PRESETS = {
    PRESET_MINIMAL: (False, False),
    PRESET_FRIEND: (False, True),
    PRESET_WORK: (True, False),
    PRESET_PUBLIC: (True, True),
}


@dataclass(frozen=True)
class Disclosure:
    show_contact_info: bool
    show_social_links: bool


@dataclass(frozen=True)
class PublicView:
    public_id: str
    display_name: str
    full_name: str
    initials: str
    avatar_url: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    bio: str = ""
    tags: tuple[TagRecord, ...] = ()
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    social_links: tuple[SocialLinkRecord, ...] = ()
    preset: Optional[str] = None
    contact_disclosed: bool = False

    @property
    def likes(self) -> list[TagRecord]:
        return [t for t in self.tags if t.kind == TAG_KIND_LIKE]

    @property
    def dislikes(self) -> list[TagRecord]:
        return [t for t in self.tags if t.kind == TAG_KIND_DISLIKE]

    @property
    def has_contact(self) -> bool:
        return bool(self.email or self.phone or self.website)

    def as_dict(self) -> dict:
        return {
            "public_id": self.public_id,
            "display_name": self.display_name,
            "full_name": self.full_name,
            "initials": self.initials,
            "avatar_url": self.avatar_url,
            "job_title": self.job_title,
            "company": self.company,
            "location": self.location,
            "bio": self.bio,
            "likes": [t.name for t in self.likes],
            "dislikes": [t.name for t in self.dislikes],
            "contact": {
                key: value
                for key, value in (("email", self.email), ("phone", self.phone), ("website", self.website))
                if value
            },
            "social_links": [{"platform": l.platform, "url": l.url} for l in self.social_links],
            "preset": self.preset,
        }


def _clean(value: str | None) -> Optional[str]:
    v = (value or "").strip()
    return v or None


WEB_SCHEMES = ("http", "https")


def safe_url(value: str | None, *, allow_local: bool = False) -> Optional[str]:
    """
    Keep only absolute http(s) URLs (or, with ``allow_local``, same-origin
    paths such as /static/uploads/...). Anything else, e.g. ``javascript:``,
    becomes None so it can never reach an href or src.
    """
    v = _clean(value)
    if not v or any(ch in v for ch in "\r\n\t"):
        return None
    if allow_local and v.startswith("/") and not v.startswith("//"):
        return v
    parts = urlsplit(v)
    if parts.scheme.lower() in WEB_SCHEMES and parts.netloc:
        return v
    return None


def normalize_preset(value: str | None) -> Optional[str]:
    """Known preset name (lower-cased) or None; unknown names are ignored."""
    name = (value or "").strip().lower()
    return name if name in PRESETS else None


def effective_disclosure(profile: ProfileRecord, preset: str | None = None) -> Disclosure:
    contact = bool(profile.show_contact_info)
    social = bool(profile.show_social_links)
    # the owner's default preset always applies; a link preset can only narrow further
    for name in (normalize_preset(profile.visibility_preset), normalize_preset(preset)):
        if name:
            allow_contact, allow_social = PRESETS[name]
            contact = contact and allow_contact
            social = social and allow_social
    return Disclosure(show_contact_info=contact, show_social_links=social)


def display_name_for(profile: ProfileRecord) -> str:
    return _clean(profile.display_name) or (profile.full_name or "").strip()


def initials_for(name: str) -> str:
    parts = [p for p in (name or "").split() if p]
    return "".join(p[0] for p in parts).upper()[:2]


def filter_tags(tags: Iterable[TagRecord], query: str | None) -> tuple[TagRecord, ...]:
    """Case-insensitive substring match on tag name; empty query keeps everything."""
    items = tuple(tags)
    q = (query or "").lower()
    if not q:
        return items
    return tuple(t for t in items if q in (t.name or "").lower())


def project(
    profile: ProfileRecord,
    tags: Sequence[TagRecord],
    links: Sequence[SocialLinkRecord],
    *,
    query: str = "",
    preset: str | None = None,
) -> PublicView:
    """Build the anonymous visitor's view of a profile."""
    display_name = display_name_for(profile)
    bio = _clean(profile.long_bio) or _clean(profile.short_bio) or ""
    disclosure = effective_disclosure(profile, preset)

    email = phone = website = None
    if disclosure.show_contact_info:
        email = _clean(profile.email)
        phone = _clean(profile.phone)
        website = safe_url(profile.website)

    visible_links: tuple[SocialLinkRecord, ...] = ()
    if disclosure.show_social_links:
        visible_links = tuple(
            SocialLinkRecord(platform=l.platform, url=safe_url(l.url), id=l.id)
            for l in links
            if safe_url(l.url)
        )

    return PublicView(
        public_id=profile.public_id,
        display_name=display_name,
        full_name=(profile.full_name or "").strip(),
        initials=initials_for(display_name),
        avatar_url=safe_url(profile.avatar_url, allow_local=True),
        job_title=_clean(profile.job_title),
        company=_clean(profile.company),
        location=_clean(profile.location),
        bio=bio,
        tags=filter_tags(tags, query),
        email=email,
        phone=phone,
        website=website,
        social_links=visible_links,
        preset=normalize_preset(preset),
        contact_disclosed=disclosure.show_contact_info,
    )

"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update, delete, func

from tagcard.db.models import Profile, RetiredPublicId, Tag, SocialLink, ViewEvent
from tagcard.db.session import get_session, session_scope
from tagcard.domain.profiles import (
    ProfileRecord,
    SocialLinkRecord,
    TagRecord,
    normalize_tag_kind,
)
from tagcard.domain.public_ids import generate_public_id

PROFILE_FIELDS = (
    "full_name",
    "display_name",
    "avatar_url",
    "job_title",
    "company",
    "short_bio",
    "long_bio",
    "email",
    "phone",
    "website",
    "location",
    "show_contact_info",
    "show_social_links",
    "visibility_preset",
)


def _profile_record(entity: Profile) -> ProfileRecord:
    return ProfileRecord(
        id=entity.id,
        public_id=entity.public_id,
        full_name=entity.full_name or "",
        display_name=entity.display_name,
        avatar_url=entity.avatar_url,
        job_title=entity.job_title,
        company=entity.company,
        short_bio=entity.short_bio,
        long_bio=entity.long_bio,
        email=entity.email,
        phone=entity.phone,
        website=entity.website,
        location=entity.location,
        show_contact_info=bool(entity.show_contact_info),
        show_social_links=bool(entity.show_social_links),
        visibility_preset=entity.visibility_preset,
        view_count=int(entity.view_count or 0),
    )


def _tag_record(entity: Tag) -> TagRecord:
    return TagRecord(id=entity.id, name=entity.name, kind=entity.kind)


def _link_record(entity: SocialLink) -> SocialLinkRecord:
    return SocialLinkRecord(id=entity.id, platform=entity.platform, url=entity.url)


class SQLRepository:
    """Point lookups and equality-filtered scans over the profile tables."""

    # -------------------------- profiles --------------------------
    def get_profile(self, profile_id: str) -> Optional[ProfileRecord]:
        with get_session() as session:
            entity = session.get(Profile, profile_id)
            return _profile_record(entity) if entity else None

    def find_profiles_by_public_id(self, public_id: str) -> list[ProfileRecord]:
        """Exact match only; callers decide what zero or several rows mean."""
        with get_session() as session:
            stmt = select(Profile).where(Profile.public_id == public_id).limit(2)
            return [_profile_record(p) for p in session.execute(stmt).scalars().all()]

    def public_id_exists(self, public_id: str) -> bool:
        """True while the id is in use or after it has been retired; ids are never reissued."""
        value = (public_id or "").strip()
        if not value:
            return False
        with get_session() as session:
            stmt = select(Profile.id).where(Profile.public_id == value).limit(1)
            if session.execute(stmt).first() is not None:
                return True
            return session.get(RetiredPublicId, value) is not None

    def create_profile(self, profile_id: str, full_name: str, public_id: str | None = None, **fields) -> ProfileRecord:
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        if not (full_name or "").strip():
            raise ValueError("full_name is required")
        if public_id is not None and self.public_id_exists(public_id):
            raise ValueError(f"public_id {public_id!r} is already taken or retired")
        value = public_id or generate_public_id()
        while self.public_id_exists(value):
            value = generate_public_id()
        now = datetime.now(timezone.utc)
        entity = Profile(
            id=profile_id,
            public_id=value,
            full_name=full_name.strip(),
            view_count=0,
            created_at=now,
            updated_at=now,
        )
        entity.show_contact_info = True
        entity.show_social_links = True
        for key, val in fields.items():
            setattr(entity, key, val)
        with session_scope() as session:
            session.add(entity)
            session.flush()
            return _profile_record(entity)

    def update_profile(self, profile_id: str, **fields) -> None:
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        if not fields:
            return
        with session_scope() as session:
            stmt = (
                update(Profile)
                .where(Profile.id == profile_id)
                .values(**fields, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)

    def delete_profile(self, profile_id: str) -> bool:
        """Remove a profile and every row that belongs to it, in one transaction."""
        with session_scope() as session:
            entity = session.get(Profile, profile_id)
            if not entity:
                return False
            session.merge(RetiredPublicId(public_id=entity.public_id, retired_at=datetime.now(timezone.utc)))
            session.execute(delete(ViewEvent).where(ViewEvent.profile_id == profile_id))
            session.execute(delete(Tag).where(Tag.profile_id == profile_id))
            session.execute(delete(SocialLink).where(SocialLink.profile_id == profile_id))
            result = session.execute(delete(Profile).where(Profile.id == profile_id))
            return bool(result.rowcount)

    # -------------------------- tags --------------------------
    def list_tags(self, profile_id: str) -> list[TagRecord]:
        with get_session() as session:
            stmt = select(Tag).where(Tag.profile_id == profile_id).order_by(Tag.id)
            return [_tag_record(t) for t in session.execute(stmt).scalars().all()]

    def add_tag(self, profile_id: str, name: str, kind: str | None = None) -> TagRecord:
        entity = Tag(profile_id=profile_id, name=(name or "").strip(), kind=normalize_tag_kind(kind))
        with session_scope() as session:
            session.add(entity)
            session.flush()
            return _tag_record(entity)

    def delete_tag(self, tag_id: int) -> None:
        with session_scope() as session:
            session.execute(delete(Tag).where(Tag.id == tag_id))

    # -------------------------- social links --------------------------
    def list_social_links(self, profile_id: str) -> list[SocialLinkRecord]:
        with get_session() as session:
            stmt = select(SocialLink).where(SocialLink.profile_id == profile_id).order_by(SocialLink.id)
            return [_link_record(l) for l in session.execute(stmt).scalars().all()]

    def add_social_link(self, profile_id: str, platform: str, url: str) -> SocialLinkRecord:
        entity = SocialLink(profile_id=profile_id, platform=(platform or "").strip(), url=(url or "").strip())
        with session_scope() as session:
            session.add(entity)
            session.flush()
            return _link_record(entity)

    # -------------------------- views --------------------------
    def add_view_event(self, profile_id: str, referrer: str | None, user_agent: str | None) -> None:
        entity = ViewEvent(
            profile_id=profile_id,
            referrer=referrer,
            user_agent=user_agent,
            viewed_at=datetime.now(timezone.utc),
        )
        with session_scope() as session:
            session.add(entity)

    def increment_view_count(self, profile_id: str) -> int:
        """Atomic ``view_count = view_count + 1``; returns the new value (0 if no row)."""
        with session_scope() as session:
            stmt = (
                update(Profile)
                .where(Profile.id == profile_id)
                .values(view_count=Profile.view_count + 1)
            )
            if not session.execute(stmt).rowcount:
                return 0
            current = session.execute(select(Profile.view_count).where(Profile.id == profile_id)).scalar()
            return int(current or 0)

    def count_view_events(self, profile_id: str) -> int:
        with get_session() as session:
            stmt = select(func.count(ViewEvent.id)).where(ViewEvent.profile_id == profile_id)
            return int(session.execute(stmt).scalar() or 0)

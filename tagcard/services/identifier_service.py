"""Resolve a public identifier to the profile it locates."""
from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tagcard.domain.profiles import ProfileRecord, SocialLinkRecord, TagRecord
from tagcard.domain.public_ids import is_valid_public_id
from tagcard.domain.visibility import PublicView, project
from tagcard.repositories.sql_repository import SQLRepository
from tagcard.services.errors import ProfileNotFoundError, TransientBackendError


@dataclass(frozen=True)
class ResolvedProfile:
    profile: ProfileRecord
    tags: tuple[TagRecord, ...]
    links: tuple[SocialLinkRecord, ...]

    def public_view(self, *, query: str = "", preset: str | None = None) -> PublicView:
        return project(self.profile, self.tags, self.links, query=query, preset=preset)


class IdentifierService:
    """Exact-match lookup by public_id; fails closed."""

    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def resolve(self, public_id: str) -> ResolvedProfile:
        value = public_id or ""
        if not is_valid_public_id(value):
            raise ProfileNotFoundError(public_id)
        try:
            matches = self.repository.find_profiles_by_public_id(value)
            if len(matches) != 1:
                if matches:
                    logger.error("public_id {} matched {} profiles", value, len(matches))
                raise ProfileNotFoundError(public_id)
            profile = matches[0]
            tags = tuple(self.repository.list_tags(profile.id))
            links = tuple(self.repository.list_social_links(profile.id))
        except SQLAlchemyError as exc:
            logger.error("Profile lookup failed for {}: {}", value, exc)
            raise TransientBackendError(str(exc)) from exc
        return ResolvedProfile(profile=profile, tags=tags, links=links)

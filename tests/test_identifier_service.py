from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from tagcard.domain.profiles import ProfileRecord
from tagcard.repositories.sql_repository import SQLRepository
from tagcard.services.errors import ProfileNotFoundError, TransientBackendError
from tagcard.services.identifier_service import IdentifierService


class _DuplicateRepo:
    def find_profiles_by_public_id(self, public_id):
        return [
            ProfileRecord(id="a", public_id=public_id, full_name="A"),
            ProfileRecord(id="b", public_id=public_id, full_name="B"),
        ]


class _BrokenRepo:
    def find_profiles_by_public_id(self, public_id):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


def test_resolve_existing_profile(temp_db):
    repo = SQLRepository()
    repo.create_profile("acc-1", "Jane Doe", public_id="abc123")
    repo.add_tag("acc-1", "Coffee")

    resolved = IdentifierService(repo).resolve("abc123")
    assert resolved.profile.id == "acc-1"
    assert [t.name for t in resolved.tags] == ["Coffee"]
    assert resolved.public_view().display_name == "Jane Doe"


def test_unknown_id_is_not_found(temp_db):
    with pytest.raises(ProfileNotFoundError):
        IdentifierService().resolve("zzz999")


@pytest.mark.parametrize("value", ["", "has space", "../etc", "x" * 65])
def test_malformed_id_is_not_found_without_lookup(value):
    with pytest.raises(ProfileNotFoundError):
        IdentifierService(_BrokenRepo()).resolve(value)


def test_duplicate_match_fails_closed():
    with pytest.raises(ProfileNotFoundError):
        IdentifierService(_DuplicateRepo()).resolve("abc123")


def test_backend_failure_is_transient():
    with pytest.raises(TransientBackendError):
        IdentifierService(_BrokenRepo()).resolve("abc123")

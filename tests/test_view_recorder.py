from __future__ import annotations

from tagcard.repositories.sql_repository import SQLRepository
from tagcard.services.view_recorder import MAX_REFERRER, ViewRecorder


class _FlakyRepo:
    def __init__(self, fail_insert=False, fail_increment=False):
        self.fail_insert = fail_insert
        self.fail_increment = fail_increment
        self.events = []
        self.increments = 0

    def add_view_event(self, profile_id, referrer, user_agent):
        if self.fail_insert:
            raise RuntimeError("insert failed")
        self.events.append((profile_id, referrer, user_agent))

    def increment_view_count(self, profile_id):
        if self.fail_increment:
            raise RuntimeError("update failed")
        self.increments += 1
        return self.increments


def test_record_view_writes_event_and_counter(temp_db):
    repo = SQLRepository()
    repo.create_profile("acc-1", "Jane Doe", public_id="abc123")
    recorder = ViewRecorder(repo)

    recorder.record_view("acc-1", referrer="https://ref.example", user_agent="pytest")
    recorder.record_view("acc-1")

    assert repo.count_view_events("acc-1") == 2
    assert repo.get_profile("acc-1").view_count == 2


def test_failed_insert_still_increments():
    repo = _FlakyRepo(fail_insert=True)
    ViewRecorder(repo).record_view("acc-1")
    assert repo.events == []
    assert repo.increments == 1


def test_failed_increment_is_swallowed():
    repo = _FlakyRepo(fail_increment=True)
    ViewRecorder(repo).record_view("acc-1", referrer="  ", user_agent="ua")
    assert repo.events == [("acc-1", None, "ua")]


def test_long_referrer_is_trimmed():
    repo = _FlakyRepo()
    ViewRecorder(repo).record_view("acc-1", referrer="r" * (MAX_REFERRER + 50))
    assert len(repo.events[0][1]) == MAX_REFERRER

from __future__ import annotations

import urllib.parse as urlparse

import pytest

from tagcard.domain.profiles import ProfileRecord
from tagcard.domain.visibility import project
from tagcard.services.errors import ShareCancelled, UnknownShareTargetError
from tagcard.services.share_service import (
    COPY_CONFIRMATION,
    DEEP_LINKS,
    ShareService,
)

URL = "https://tagcard.test/p/abc123"


def _view():
    return project(ProfileRecord(id="acc-1", public_id="abc123", full_name="Jane Doe"), (), ())


@pytest.mark.parametrize("target", sorted(DEEP_LINKS))
def test_deep_links_embed_encoded_url(target):
    plan = ShareService().plan(target, _view(), URL)
    assert plan.action == "redirect"
    assert urlparse.quote(URL, safe="") in plan.href


def test_whatsapp_and_twitter_shapes():
    service = ShareService()
    assert service.plan("whatsapp", _view(), URL).href.startswith("https://wa.me/?text=")
    twitter = service.plan("twitter", _view(), URL).href
    parsed = urlparse.urlparse(twitter)
    params = urlparse.parse_qs(parsed.query)
    assert params["url"] == [URL]
    assert params["text"] == ["Check out Jane Doe's TagCard profile!"]


def test_instagram_copies_and_explains():
    plan = ShareService().plan("Instagram", _view(), URL)
    assert plan.action == "clipboard"
    assert "Instagram" in plan.message


def test_unknown_target():
    with pytest.raises(UnknownShareTargetError):
        ShareService().plan("myspace", _view(), URL)


def test_native_share_receives_title_text_url():
    calls = []
    ShareService().share("native", _view(), URL, native=lambda *args: calls.append(args))
    assert calls == [("Jane Doe on TagCard", "Check out Jane Doe's TagCard profile!", URL)]


def test_cancelled_native_share_is_silent():
    copied = []

    def dismiss(title, text, url):
        raise ShareCancelled()

    plan = ShareService().share("native", _view(), URL, native=dismiss, clipboard=copied.append)
    assert plan.action == "native"
    assert copied == []


def test_native_unavailable_falls_back_to_clipboard():
    copied = []
    plan = ShareService().share("native", _view(), URL, clipboard=copied.append)
    assert plan.action == "clipboard"
    assert plan.message == COPY_CONFIRMATION
    assert copied == [URL]

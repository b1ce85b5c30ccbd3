from __future__ import annotations

import pytest

from tagcard.domain.profiles import ProfileRecord, SocialLinkRecord, TagRecord
from tagcard.domain.visibility import (
    PRESETS,
    effective_disclosure,
    filter_tags,
    initials_for,
    normalize_preset,
    project,
)


def _profile(**overrides) -> ProfileRecord:
    data = dict(
        id="acc-1",
        public_id="abc123",
        full_name="Jane Doe",
        email="jane@x.com",
        phone="+1 555 0100",
        website="https://jane.example",
        show_contact_info=True,
        show_social_links=True,
    )
    data.update(overrides)
    return ProfileRecord(**data)


TAGS = (
    TagRecord(name="Coffee", kind="like"),
    TagRecord(name="Coffee shops", kind="like"),
    TagRecord(name="Mondays", kind="dislike"),
)
LINKS = (SocialLinkRecord(platform="LinkedIn", url="https://linkedin.com/in/jane"),)


def test_contact_hidden_when_disclosure_off():
    view = project(_profile(show_contact_info=False), TAGS, LINKS)
    assert view.email is None
    assert view.phone is None
    assert view.website is None
    assert not view.has_contact
    assert "contact" in view.as_dict() and view.as_dict()["contact"] == {}


def test_contact_included_when_disclosure_on():
    view = project(_profile(), TAGS, LINKS)
    assert view.email == "jane@x.com"
    assert view.phone == "+1 555 0100"
    assert view.website == "https://jane.example"


def test_social_links_empty_when_hidden():
    view = project(_profile(show_social_links=False), TAGS, LINKS)
    assert view.social_links == ()


def test_display_name_falls_back_to_full_name():
    assert project(_profile(display_name="  "), (), ()).display_name == "Jane Doe"
    assert project(_profile(display_name="JD"), (), ()).display_name == "JD"


def test_long_bio_preferred_over_short_bio():
    assert project(_profile(short_bio="short", long_bio="long"), (), ()).bio == "long"
    assert project(_profile(short_bio="short", long_bio=""), (), ()).bio == "short"
    assert project(_profile(), (), ()).bio == ""


def test_always_public_fields_survive_hidden_contact():
    view = project(
        _profile(show_contact_info=False, show_social_links=False, job_title="CTO", company="Acme", location="Lisbon"),
        TAGS,
        LINKS,
    )
    assert (view.job_title, view.company, view.location) == ("CTO", "Acme", "Lisbon")
    assert len(view.tags) == 3


def test_query_filters_tags_case_insensitively_and_leaves_bio():
    profile = _profile(long_bio="I love coffee")
    view = project(profile, TAGS, LINKS, query="COFFEE")
    assert [t.name for t in view.tags] == ["Coffee", "Coffee shops"]
    assert view.bio == "I love coffee"
    assert view.email == "jane@x.com"


def test_empty_query_is_identity_and_input_untouched():
    tags = list(TAGS)
    assert filter_tags(tags, "") == TAGS
    filter_tags(tags, "mon")
    assert tags == list(TAGS)


def test_likes_and_dislikes_split():
    view = project(_profile(), TAGS, LINKS)
    assert [t.name for t in view.likes] == ["Coffee", "Coffee shops"]
    assert [t.name for t in view.dislikes] == ["Mondays"]


@pytest.mark.parametrize("preset", sorted(PRESETS))
def test_presets_never_widen_disclosure(preset):
    locked = _profile(show_contact_info=False, show_social_links=False)
    view = project(locked, TAGS, LINKS, preset=preset)
    assert view.email is None and view.phone is None and view.website is None
    assert view.social_links == ()


def test_presets_narrow_disclosure():
    profile = _profile()
    assert effective_disclosure(profile, "minimal") == effective_disclosure(
        _profile(show_contact_info=False, show_social_links=False)
    )
    friend = project(profile, TAGS, LINKS, preset="friend")
    assert friend.email is None and friend.social_links == LINKS
    work = project(profile, TAGS, LINKS, preset="work")
    assert work.email == "jane@x.com" and work.social_links == ()


def test_unknown_preset_is_ignored():
    assert normalize_preset("vip") is None
    view = project(_profile(), TAGS, LINKS, preset="vip")
    assert view.email == "jane@x.com"
    assert view.preset is None


def test_initials():
    assert initials_for("Jane Doe") == "JD"
    assert initials_for("jane mary doe") == "JM"
    assert initials_for("Prince") == "P"


def test_owner_default_preset_applies_and_link_cannot_widen_it():
    profile = _profile(visibility_preset="work")
    assert project(profile, TAGS, LINKS).social_links == ()
    widened = project(profile, TAGS, LINKS, preset="public")
    assert widened.social_links == ()
    assert widened.email == "jane@x.com"
    assert project(profile, TAGS, LINKS, preset="friend").email is None


def test_non_web_urls_never_reach_the_view():
    profile = _profile(
        website="javascript:alert(document.cookie)",
        avatar_url="javascript:alert(2)",
    )
    links = (
        SocialLinkRecord(platform="Evil", url="javascript:alert(1)"),
        SocialLinkRecord(platform="Data", url="data:text/html,<script>alert(1)</script>"),
        SocialLinkRecord(platform="GitHub", url="https://github.com/jane"),
    )
    view = project(profile, TAGS, links)
    assert view.website is None
    assert view.avatar_url is None
    assert [l.url for l in view.social_links] == ["https://github.com/jane"]


@pytest.mark.parametrize(
    "value,expected",
    [
        ("https://jane.example", "https://jane.example"),
        ("HTTP://jane.example/x", "HTTP://jane.example/x"),
        ("/static/uploads/a.png", "/static/uploads/a.png"),
        ("//evil.example/a.png", None),
        ("jane.example", None),
        ("vbscript:msgbox(1)", None),
    ],
)
def test_avatar_accepts_web_and_upload_paths_only(value, expected):
    assert project(_profile(avatar_url=value), (), ()).avatar_url == expected


def test_query_is_not_trimmed():
    tags = (TagRecord(name="Coffee shops"), TagRecord(name="Coffees"))
    assert [t.name for t in filter_tags(tags, "e ")] == ["Coffee shops"]
    assert [t.name for t in filter_tags(tags, " ")] == ["Coffee shops"]
    assert filter_tags(tags, "   ") == ()


def test_contact_disclosed_follows_effective_disclosure():
    assert project(_profile(email=None, phone=None, website=None), (), ()).contact_disclosed is True
    assert project(_profile(), (), (), preset="minimal").contact_disclosed is False
    assert project(_profile(show_contact_info=False), (), ()).contact_disclosed is False

from __future__ import annotations

from tagcard.domain.profiles import ProfileRecord
from tagcard.domain.visibility import project
from tagcard.services.vcard_service import build_vcard, escape_text, vcard_filename


def _view(**overrides):
    data = dict(id="acc-1", public_id="abc123", full_name="Jane Doe")
    data.update(overrides)
    return project(ProfileRecord(**data), (), ())


def test_name_only_vcard_has_no_empty_lines():
    card = build_vcard(_view())
    assert card == "BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Jane Doe\r\nN:Jane Doe;;;\r\nEND:VCARD\r\n"
    lines = card.split("\r\n")[:-1]
    assert all(":" in line and not line.endswith(":") for line in lines)


def test_full_vcard_fields():
    view = _view(
        job_title="CTO",
        company="Acme, Inc.",
        email="jane@x.com",
        phone="+1 555 0100",
        website="https://jane.example",
        location="Lisbon",
    )
    lines = build_vcard(view).split("\r\n")
    assert "TITLE:CTO" in lines
    assert "ORG:Acme\\, Inc." in lines
    assert "EMAIL:jane@x.com" in lines
    assert "TEL:+1 555 0100" in lines
    assert "URL:https://jane.example" in lines
    assert "ADR:;;Lisbon;;;;" in lines


def test_hidden_contact_never_reaches_vcard():
    view = _view(email="jane@x.com", phone="123", show_contact_info=False)
    card = build_vcard(view)
    assert "EMAIL" not in card
    assert "TEL" not in card


def test_profile_url_line_added_once():
    card = build_vcard(_view(), profile_url="https://tagcard.test/p/abc123")
    assert card.count("URL:") == 1
    same = build_vcard(_view(website="https://tagcard.test/p/abc123"), profile_url="https://tagcard.test/p/abc123")
    assert same.count("URL:") == 1


def test_escape_text():
    assert escape_text("a;b,c\\d\ne") == "a\\;b\\,c\\\\d\\ne"


def test_filename_replaces_spaces():
    assert vcard_filename(_view()) == "Jane_Doe.vcf"


def test_line_breaks_cannot_inject_properties():
    view = _view(
        phone="+1 555\r\nORG:Evil Corp",
        email="jane@x.com\nTITLE:Owner",
        website="https://jane.example\r\nNOTE:hi",
    )
    lines = build_vcard(view, profile_url="https://tagcard.test/p/abc123\nX-EVIL:1").split("\r\n")
    assert not any(line.startswith(("ORG", "TITLE", "NOTE", "X-EVIL")) for line in lines)
    assert "TEL:+1 555ORG:Evil Corp" in lines
    assert all("\n" not in line and "\r" not in line for line in lines)

#!/usr/bin/env python3
"""
Create a profile (plus tags and social links) directly in the database.

Usage:
  python scripts/add_profile.py --id <account-id> --name "Jane Doe" \
      [--public-id abc123] [--email jane@x.com] [--hide-contact] \
      [--like Coffee] [--dislike Mondays] [--link "LinkedIn=https://linkedin.com/in/jane"]
"""
from __future__ import annotations

import argparse
import sys

from loguru import logger

from tagcard.core.logging import configure_logging
from tagcard.core.utils import share_url
from tagcard.db.create_tables import create_schema
from tagcard.domain.public_ids import is_valid_public_id
from tagcard.repositories.sql_repository import SQLRepository


def parse_link(value: str) -> tuple[str, str]:
    platform, sep, url = (value or "").partition("=")
    if not sep or not platform.strip() or not url.strip():
        raise argparse.ArgumentTypeError("links must look like Platform=https://...")
    return platform.strip(), url.strip()


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a TagCard profile")
    ap.add_argument("--id", required=True, help="Account id the profile belongs to")
    ap.add_argument("--name", required=True, help="Full name")
    ap.add_argument("--public-id", help="Public identifier (default: random)")
    ap.add_argument("--display-name")
    ap.add_argument("--title", dest="job_title")
    ap.add_argument("--company")
    ap.add_argument("--bio", dest="short_bio")
    ap.add_argument("--email")
    ap.add_argument("--phone")
    ap.add_argument("--website")
    ap.add_argument("--location")
    ap.add_argument("--avatar", dest="avatar_url")
    ap.add_argument("--hide-contact", action="store_true", help="Hide e-mail/phone/website")
    ap.add_argument("--hide-social", action="store_true", help="Hide social links")
    ap.add_argument("--like", action="append", default=[])
    ap.add_argument("--dislike", action="append", default=[])
    ap.add_argument("--link", action="append", default=[], type=parse_link)
    args = ap.parse_args()

    configure_logging()
    create_schema()
    repo = SQLRepository()
    profile_id = (args.id or "").strip()
    if not profile_id:
        raise SystemExit("Invalid account id")
    if repo.get_profile(profile_id):
        raise SystemExit(f"Profile '{profile_id}' already exists")
    public_id = (args.public_id or "").strip() or None
    if public_id:
        if not is_valid_public_id(public_id):
            raise SystemExit("Invalid public id (use [A-Za-z0-9_-], up to 64 chars)")
        if repo.public_id_exists(public_id):
            raise SystemExit(f"Public id '{public_id}' is already in use")

    fields = {
        key: getattr(args, key)
        for key in ("display_name", "job_title", "company", "short_bio", "email", "phone", "website", "location", "avatar_url")
        if getattr(args, key)
    }
    profile = repo.create_profile(
        profile_id,
        args.name,
        public_id=public_id,
        show_contact_info=not args.hide_contact,
        show_social_links=not args.hide_social,
        **fields,
    )
    for name in args.like:
        repo.add_tag(profile.id, name, "like")
    for name in args.dislike:
        repo.add_tag(profile.id, name, "dislike")
    for platform, url in args.link:
        repo.add_social_link(profile.id, platform, url)

    logger.info("Profile {} created", profile.id)
    print("OK: profile created")
    print(f"  Id: {profile.id}")
    print(f"  Public id: {profile.public_id}")
    print(f"  URL: {share_url(profile.public_id)}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)

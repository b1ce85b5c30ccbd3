#!/usr/bin/env python3
"""
Delete a profile (account deletion): tags, social links and view events go with it.

Usage:
  python scripts/delete_profile.py --id <account-id> [--yes]
"""
from __future__ import annotations

import argparse
import sys

from loguru import logger

from tagcard.core.logging import configure_logging
from tagcard.repositories.sql_repository import SQLRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Delete a TagCard profile and everything it owns")
    ap.add_argument("--id", required=True, help="Account id of the profile")
    ap.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = ap.parse_args()

    configure_logging()
    repo = SQLRepository()
    profile_id = (args.id or "").strip()
    profile = repo.get_profile(profile_id)
    if not profile:
        raise SystemExit(f"Profile '{profile_id}' not found")
    if not args.yes:
        answer = input(f"Delete '{profile.full_name}' ({profile.public_id})? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            raise SystemExit("Aborted")

    repo.delete_profile(profile_id)
    logger.info("Profile {} deleted", profile_id)
    print("OK: profile deleted")
    print(f"  Id: {profile_id}")
    print(f"  Public id retired: {profile.public_id}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)

"""Create (or rebuild) the profile tables on the configured database."""
from __future__ import annotations

import argparse

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers the tables on Base.metadata


def create_schema(engine: Engine | None = None, *, reset: bool = False) -> Engine:
    """Create every table; with ``reset`` drop them first. Returns the engine used."""
    engine = engine or get_engine()
    if reset:
        Base.metadata.drop_all(bind=engine)
        logger.warning("Dropped all tables on {}", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
    return engine


def drop_schema(engine: Engine | None = None) -> None:
    Base.metadata.drop_all(bind=engine or get_engine())


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Create the TagCard tables")
    ap.add_argument("--reset", action="store_true", help="Drop existing tables first (destroys data)")
    args = ap.parse_args()
    try:
        create_schema(reset=args.reset)
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc

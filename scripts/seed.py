"""Seed the database with the bundled perfume catalog."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from vitrine.db.migrate import run_migrations
from vitrine.db.seed import seed_catalog
from vitrine.db.session import create_engine_from_env
from vitrine.ingest import load_seed_catalog


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    engine = create_engine_from_env()
    run_migrations(engine)
    seed_catalog(engine, load_seed_catalog())
    print("Seed complete")


if __name__ == "__main__":
    main()

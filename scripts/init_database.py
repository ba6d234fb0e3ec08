#!/usr/bin/env python3
"""
Initialize the Library Catalog database.

This script:
1. Creates all database tables
2. Runs the idempotent bootstrap seed (roles, bootstrap users, sample book)
3. Optionally loads randomized demo books and members

Usage:
    python scripts/init_database.py [--drop-existing] [--sample-data N] [--database-url URL]
"""

import argparse
import logging
import random
import sys
from datetime import datetime, timedelta
from decimal import Decimal

from faker import Faker

from library_catalog.config import get_config
from library_catalog.database import BookRepository, DatabaseManager, MemberRepository
from library_catalog.database.seed import seed_database
from library_catalog.exceptions import ConstraintViolationError, LibraryCatalogError
from library_catalog.models import Book, Member

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

GENRES = ["Fiction", "Science Fiction", "Mystery", "Biography", "History", "Fantasy", None]

fake = Faker()
Faker.seed(42)
random.seed(42)


def main():
    """Main entry point for database initialization."""
    parser = argparse.ArgumentParser(description="Initialize the Library Catalog database")
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating new ones",
    )
    parser.add_argument(
        "--sample-data",
        type=int,
        default=0,
        metavar="N",
        help="Load N randomized books and N randomized members",
    )
    parser.add_argument(
        "--database-url",
        help="Override the configured database URL",
    )

    args = parser.parse_args()
    config = get_config()
    db_manager = DatabaseManager(args.database_url or config.get_database_url())

    if not db_manager.verify_connection():
        logger.error("Failed to connect to database")
        sys.exit(1)

    try:
        db_manager.init_database(drop_existing=args.drop_existing)

        with db_manager.session_scope() as session:
            report = seed_database(session, config)
            logger.info("Bootstrap seed: %s", report.model_dump())

        if args.sample_data:
            with db_manager.session_scope() as session:
                load_sample_data(session, args.sample_data)

        logger.info("Database initialization complete")
    except LibraryCatalogError:
        logger.exception("Database initialization failed")
        sys.exit(1)
    finally:
        db_manager.close()


def load_sample_data(session, count: int) -> None:
    """Add ``count`` random books and members through the repositories."""
    books = BookRepository(session)
    members = MemberRepository(session)

    for _ in range(count):
        books.add(
            Book(
                title=fake.catch_phrase()[:200],
                author=fake.name(),
                published_year=random.choice([None, random.randint(1850, datetime.now().year)]),
                price=Decimal(random.randint(0, 9999)) / 100,
                genre=random.choice(GENRES),
            )
        )

    added = 0
    for _ in range(count):
        try:
            members.add(
                Member(
                    full_name=fake.name(),
                    email=fake.unique.email(),
                    join_date=datetime.now() - timedelta(days=random.randint(0, 3650)),
                )
            )
            added += 1
        except ConstraintViolationError:
            logger.warning("Skipped member with an email already in the store")

    logger.info("Loaded %d books and %d members", count, added)


if __name__ == "__main__":
    main()

"""
Initialize database with tables and indexes.

Run this script to set up the database schema.
"""

import argparse

from sqlalchemy import text

from database import SessionLocal, engine, init_db
from repositories.topic_repository import TopicRepository
from utils.error_handling import ValidationError
from logger_config import logger


def check_connection() -> None:
    """Fail early with a readable message when the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("=" * 60)
        logger.error("Database connection failed!")
        logger.error("=" * 60)
        logger.error(f"Error: {e}")
        logger.error("Check DATABASE_URL in your .env file")
        raise


def seed_topics(names: list[str]) -> None:
    """Create topics that do not exist yet."""
    db = SessionLocal()
    try:
        repo = TopicRepository(db)
        for name in names:
            try:
                topic = repo.create(name=name)
                logger.info(f"Created topic '{topic.name}' ({topic.id})")
            except ValidationError as e:
                logger.info(f"Skipping topic '{name}': {e.message}")
    finally:
        db.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create Vocabdesk tables")
    parser.add_argument(
        "--topic",
        action="append",
        default=[],
        help="Topic name to create (repeatable)"
    )
    args = parser.parse_args()

    logger.info("Initializing database...")
    check_connection()
    init_db()

    if args.topic:
        seed_topics(args.topic)

    logger.info("Database initialized")


if __name__ == "__main__":
    main()

"""
Import vocabularies from a local spreadsheet.

Usage:
    python import_vocabulary.py --file words.xlsx
    python import_vocabulary.py --file words.csv --user-id <admin id>
    python import_vocabulary.py --retranslate
"""

import argparse
import json
import sys
from pathlib import Path

from database import SessionLocal
from repositories.vocabulary_repository import VocabularyRepository
from services.dictionary_client import DictionaryClient
from services.image_client import ImageClient
from services.translation_batcher import TranslationBatcher
from services.translation_client import create_translation_client
from services.vocabulary_import_service import VocabularyImportService
from utils.error_handling import VocabdeskError
from logger_config import logger


def run_import(path: Path, user_id: str = None) -> int:
    """Import one file and print the summary as JSON."""
    db = SessionLocal()
    dictionary_client = DictionaryClient()
    image_client = ImageClient()
    try:
        service = VocabularyImportService(
            db,
            dictionary_client,
            image_client,
            TranslationBatcher(db, create_translation_client())
        )
        summary = service.import_file(path.read_bytes(), path.name, created_by=user_id)
        print(json.dumps(
            summary.model_dump(by_alias=True, exclude_none=True),
            ensure_ascii=False,
            indent=2
        ))
        return 0 if summary.failed == 0 else 1
    except VocabdeskError as e:
        logger.error(f"Import of {path} failed: {e.message}")
        return 2
    finally:
        dictionary_client.close()
        image_client.close()
        db.close()


def run_retranslate() -> int:
    """Fill missing translations of every active vocabulary."""
    db = SessionLocal()
    try:
        batcher = TranslationBatcher(db, create_translation_client())
        if not batcher.enabled:
            logger.error("No translation provider configured")
            return 2
        ids = VocabularyRepository(db).list_active_ids()
        updated = batcher.translate_vocabularies(ids)
        logger.info(f"Updated {updated} definition(s) across {len(ids)} vocabularies")
        return 0
    finally:
        db.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Bulk import vocabularies")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--file", type=Path, help="CSV or Excel file to import")
    group.add_argument(
        "--retranslate",
        action="store_true",
        help="Translate missing definitions of all active vocabularies"
    )
    parser.add_argument("--user-id", help="Recorded as created_by")
    args = parser.parse_args()

    if args.retranslate:
        sys.exit(run_retranslate())

    if not args.file.exists():
        parser.error(f"File not found: {args.file}")
    sys.exit(run_import(args.file, args.user_id))


if __name__ == "__main__":
    main()

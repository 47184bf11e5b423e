"""
FastAPI dependencies wiring services to their external clients.

Tests override get_dictionary_client, get_image_client and
get_translation_client with fakes.
"""

from typing import Iterator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from services.dictionary_client import DictionaryClient
from services.image_client import ImageClient
from services.translation_batcher import TranslationBatcher
from services.translation_client import TranslationClient, create_translation_client
from services.vocabulary_import_service import VocabularyImportService
from services.vocabulary_service import VocabularyService


def get_dictionary_client() -> Iterator[DictionaryClient]:
    """Dictionary client dependency, closed after the request."""
    client = DictionaryClient()
    try:
        yield client
    finally:
        client.close()


def get_image_client() -> Iterator[ImageClient]:
    """Image client dependency, closed after the request."""
    client = ImageClient()
    try:
        yield client
    finally:
        client.close()


def get_translation_client() -> Optional[TranslationClient]:
    """Translation backend dependency; None when disabled."""
    return create_translation_client()


def get_translation_batcher(
    db: Session = Depends(get_db),
    client: Optional[TranslationClient] = Depends(get_translation_client)
) -> TranslationBatcher:
    """Translation batcher bound to the request session."""
    return TranslationBatcher(db, client)


def get_vocabulary_service(
    db: Session = Depends(get_db),
    batcher: TranslationBatcher = Depends(get_translation_batcher)
) -> VocabularyService:
    """Vocabulary service dependency."""
    return VocabularyService(db, batcher)


def get_import_service(
    db: Session = Depends(get_db),
    dictionary_client: DictionaryClient = Depends(get_dictionary_client),
    image_client: ImageClient = Depends(get_image_client),
    batcher: TranslationBatcher = Depends(get_translation_batcher)
) -> VocabularyImportService:
    """Bulk import service dependency."""
    return VocabularyImportService(db, dictionary_client, image_client, batcher)

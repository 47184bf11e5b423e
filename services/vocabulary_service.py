"""
Vocabulary service for business logic operations.

Manual create/update/delete of vocabularies and explicit re-translation.
Bulk import lives in services.vocabulary_import_service.
"""

import math
from typing import List, Optional

from sqlalchemy.orm import Session

from config import settings
from models import Vocabulary
from repositories.topic_repository import TopicRepository
from repositories.vocabulary_repository import VocabularyRepository, VOCABULARY_FIELDS
from services.dictionary_client import map_part_of_speech
from services.translation_batcher import TranslationBatcher
from utils.error_handling import (
    DuplicateVocabularyError, TopicNotFoundError, ValidationError,
    VocabularyNotFoundError
)
from logger_config import logger


def _validate_meanings(meanings: Optional[List[dict]]) -> List[dict]:
    """Check and normalize a meaning tree coming from the API."""
    if not meanings:
        raise ValidationError("At least one meaning is required")

    cleaned = []
    for meaning in meanings:
        definitions = [
            d for d in meaning.get("definitions") or []
            if (d.get("definition") or "").strip()
        ]
        if not definitions:
            raise ValidationError("Every meaning needs at least one definition")
        cleaned.append({
            **meaning,
            "part_of_speech": map_part_of_speech(meaning.get("part_of_speech")),
            "definitions": definitions,
        })
    return cleaned


class VocabularyService:
    """Service for vocabulary operations."""

    def __init__(self, db: Session, translation_batcher: TranslationBatcher):
        """
        Initialize service with database session.

        Args:
            db: Database session
            translation_batcher: Fills missing definition translations
        """
        self.vocabulary_repo = VocabularyRepository(db)
        self.topic_repo = TopicRepository(db)
        self.translation_batcher = translation_batcher

    def create(self, data: dict, created_by: Optional[str] = None) -> Vocabulary:
        """
        Create a vocabulary with its meanings, then translate it.

        Args:
            data: Vocabulary fields plus 'meanings'
            created_by: Id of the creating user

        Returns:
            Created vocabulary, translations included
        """
        word = (data.get("word") or "").strip()
        if not word:
            raise ValidationError("Word is required")
        meanings = _validate_meanings(data.get("meanings"))

        topic_id = data.get("topic_id")
        if not self.topic_repo.exists_active(topic_id):
            raise TopicNotFoundError(topic_id)
        if self.vocabulary_repo.exists_word(word):
            raise DuplicateVocabularyError(word)

        vocabulary = self.vocabulary_repo.create_tree(
            word=word,
            topic_id=topic_id,
            meanings=meanings,
            translation=data.get("translation"),
            phonetic=data.get("phonetic"),
            image_url=data.get("image_url"),
            audio_url_us=data.get("audio_url_us"),
            audio_url_uk=data.get("audio_url_uk"),
            audio_url_au=data.get("audio_url_au"),
            status=data.get("status", True) is not False,
            created_by=created_by
        )
        logger.info(f"Created vocabulary '{word}' ({vocabulary.id})")

        self.translation_batcher.translate_vocabulary(vocabulary)
        return self.vocabulary_repo.get_by_id(vocabulary.id)

    def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        status: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
        topic_id: Optional[str] = None
    ) -> dict:
        """
        List vocabularies page by page.

        Returns:
            Dict with 'vocabularies' and pagination 'meta'
        """
        page = max(page or 1, 1)
        limit = min(max(limit or settings.page_size_default, 1), settings.page_size_max)

        vocabularies, total = self.vocabulary_repo.list(
            limit=limit,
            offset=(page - 1) * limit,
            search=search,
            status=status,
            is_deleted=is_deleted,
            topic_id=topic_id
        )
        return {
            "vocabularies": vocabularies,
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "page_count": math.ceil(total / limit) or 1,
            }
        }

    def get(self, vocabulary_id: str) -> Vocabulary:
        """Get a vocabulary or raise VocabularyNotFoundError."""
        vocabulary = self.vocabulary_repo.get_by_id(vocabulary_id)
        if not vocabulary:
            raise VocabularyNotFoundError(vocabulary_id)
        return vocabulary

    def update(self, vocabulary_id: str, data: dict) -> Vocabulary:
        """
        Partially update a vocabulary.

        Given meanings replace the whole existing tree and are then
        translated like on create.

        Args:
            vocabulary_id: Vocabulary ID
            data: Only the fields to change

        Returns:
            Updated vocabulary
        """
        vocabulary = self.get(vocabulary_id)

        fields = {k: v for k, v in data.items() if k in VOCABULARY_FIELDS and v is not None}
        meanings = data.get("meanings")
        if not fields and not meanings:
            raise ValidationError("No data to update")

        if "word" in fields:
            fields["word"] = fields["word"].strip()
            if not fields["word"]:
                raise ValidationError("Word must not be empty")
            if self.vocabulary_repo.exists_word(fields["word"], exclude_id=vocabulary.id):
                raise DuplicateVocabularyError(fields["word"])
        if "topic_id" in fields and not self.topic_repo.exists_active(fields["topic_id"]):
            raise TopicNotFoundError(fields["topic_id"])
        if meanings:
            meanings = _validate_meanings(meanings)

        vocabulary = self.vocabulary_repo.update(vocabulary, fields, meanings)
        if meanings:
            self.translation_batcher.translate_vocabulary(vocabulary)
            vocabulary = self.vocabulary_repo.get_by_id(vocabulary.id)
        return vocabulary

    def delete(self, vocabulary_id: str) -> None:
        """Soft-delete a vocabulary."""
        vocabulary = self.get(vocabulary_id)
        self.vocabulary_repo.set_deleted(vocabulary, True)
        logger.info(f"Soft-deleted vocabulary {vocabulary_id}")

    def force_delete(self, vocabulary_id: str) -> None:
        """Permanently delete a vocabulary that was soft-deleted first."""
        vocabulary = self.get(vocabulary_id)
        if vocabulary.deleted_at is None:
            raise ValidationError(
                "Vocabulary must be soft-deleted before it can be permanently deleted"
            )
        self.vocabulary_repo.delete(vocabulary)

    def restore(self, vocabulary_id: str) -> None:
        """Restore a soft-deleted vocabulary."""
        vocabulary = self.get(vocabulary_id)
        if vocabulary.deleted_at is None:
            raise ValidationError(f"Vocabulary {vocabulary_id} is not deleted")
        if self.vocabulary_repo.exists_word(vocabulary.word, exclude_id=vocabulary.id):
            raise DuplicateVocabularyError(vocabulary.word)
        self.vocabulary_repo.set_deleted(vocabulary, False)
        logger.info(f"Restored vocabulary {vocabulary_id}")

    def retranslate(self, vocabulary_ids: List[str]) -> int:
        """
        Fill missing translations of the given vocabularies.

        Safe to repeat: already translated fields are left alone.

        Returns:
            Number of definitions updated
        """
        if not vocabulary_ids:
            raise ValidationError("vocabulary_ids must not be empty")
        return self.translation_batcher.translate_vocabularies(vocabulary_ids)

"""
Vocabulary repository for database operations.

Handles duplicate checks, atomic creation of the vocabulary tree
(vocabulary -> meanings -> definitions), listing and soft deletion.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from models import Vocabulary, Meaning, Definition
from repositories.topic_repository import TopicRepository
from utils.error_handling import (
    DuplicateVocabularyError, TopicNotFoundError, handle_db_errors
)
from logger_config import logger


VOCABULARY_FIELDS = (
    "word", "translation", "phonetic", "image_url",
    "audio_url_us", "audio_url_uk", "audio_url_au", "status", "topic_id",
)


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


class VocabularyRepository:
    """Repository for vocabulary operations."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.topic_repo = TopicRepository(db)

    @handle_db_errors
    def exists_word(self, word: str, exclude_id: Optional[str] = None) -> bool:
        """
        Check whether an active vocabulary already uses this word.

        Comparison is case-insensitive and ignores soft-deleted rows.

        Args:
            word: Word to check
            exclude_id: Vocabulary to ignore (the one being updated)

        Returns:
            True if the word is taken
        """
        normalized = _clean(word).lower()
        if not normalized:
            return False

        query = self.db.query(Vocabulary.id).filter(
            func.lower(Vocabulary.word) == normalized,
            Vocabulary.deleted_at.is_(None)
        )
        if exclude_id:
            query = query.filter(Vocabulary.id != exclude_id)
        return query.first() is not None

    @handle_db_errors
    def create_tree(
        self,
        word: str,
        topic_id: str,
        meanings: List[dict],
        translation: Optional[str] = None,
        phonetic: Optional[str] = None,
        image_url: Optional[str] = None,
        audio_url_us: Optional[str] = None,
        audio_url_uk: Optional[str] = None,
        audio_url_au: Optional[str] = None,
        status: bool = True,
        created_by: Optional[str] = None
    ) -> Vocabulary:
        """
        Create a vocabulary with all of its meanings and definitions.

        The whole tree is committed in one transaction; on any failure
        the session is rolled back and nothing is persisted.

        Args:
            word: Vocabulary word
            topic_id: Existing, non-deleted topic ID
            meanings: List of dicts with 'part_of_speech', 'synonyms',
                'antonyms' and 'definitions' (dicts with 'definition',
                'translation', 'example', 'example_translation')
            translation: Word-level translation
            phonetic: Phonetic transcription
            image_url: Illustration URL
            audio_url_us: US pronunciation audio
            audio_url_uk: UK pronunciation audio
            audio_url_au: AU pronunciation audio
            status: Active flag
            created_by: Id of the creating user

        Returns:
            Created vocabulary with meanings and definitions loaded

        Raises:
            TopicNotFoundError: topic missing or soft-deleted
            DuplicateVocabularyError: unique index rejected the word
        """
        if not self.topic_repo.exists_active(topic_id):
            raise TopicNotFoundError(topic_id)

        normalized_word = _clean(word)
        try:
            vocabulary = Vocabulary(
                word=normalized_word,
                translation=_clean(translation),
                phonetic=_clean(phonetic),
                image_url=_clean(image_url),
                audio_url_us=_clean(audio_url_us),
                audio_url_uk=_clean(audio_url_uk),
                audio_url_au=_clean(audio_url_au),
                status=status,
                topic_id=topic_id,
                created_by=created_by
            )
            vocabulary.meanings = self._build_meanings(meanings)
            self.db.add(vocabulary)
            self.db.commit()
            self.db.refresh(vocabulary)
            logger.debug(
                f"Created vocabulary {vocabulary.id} '{vocabulary.word}' "
                f"with {len(vocabulary.meanings)} meaning(s)"
            )
            return vocabulary
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint rejected '{normalized_word}': {e.orig}")
            raise DuplicateVocabularyError(normalized_word)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create vocabulary '{normalized_word}': {e}")
            raise

    @staticmethod
    def _build_meanings(meanings: Iterable[dict]) -> List[Meaning]:
        """Turn meaning dicts into unsaved ORM objects."""
        result = []
        for meaning_position, meaning in enumerate(meanings):
            definitions = [
                Definition(
                    position=definition_position,
                    definition=_clean(item.get("definition")),
                    translation=_clean(item.get("translation")),
                    example=_clean(item.get("example")),
                    example_translation=_clean(item.get("example_translation"))
                )
                for definition_position, item in enumerate(
                    meaning.get("definitions") or []
                )
            ]
            result.append(Meaning(
                position=meaning_position,
                part_of_speech=meaning.get("part_of_speech") or "noun",
                synonyms=list(meaning.get("synonyms") or []),
                antonyms=list(meaning.get("antonyms") or []),
                definitions=definitions
            ))
        return result

    @handle_db_errors
    def get_by_id(self, vocabulary_id: str) -> Optional[Vocabulary]:
        """
        Get vocabulary by ID with its tree loaded.

        Soft-deleted rows are returned too; callers decide.

        Args:
            vocabulary_id: Vocabulary ID

        Returns:
            Vocabulary object or None if not found
        """
        return (
            self.db.query(Vocabulary)
            .options(
                selectinload(Vocabulary.meanings)
                .selectinload(Meaning.definitions)
            )
            .filter(Vocabulary.id == vocabulary_id)
            .first()
        )

    @handle_db_errors
    def list(
        self,
        limit: int,
        offset: int = 0,
        search: Optional[str] = None,
        status: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
        topic_id: Optional[str] = None
    ) -> Tuple[List[Vocabulary], int]:
        """
        List vocabularies, newest first.

        Args:
            limit: Page size
            offset: Rows to skip
            search: Case-insensitive substring of the word
            status: Filter by active flag
            is_deleted: Filter by soft-delete flag
            topic_id: Filter by topic

        Returns:
            Tuple of (page of vocabularies, total matching)
        """
        query = self.db.query(Vocabulary)
        if search:
            query = query.filter(Vocabulary.word.ilike(f"%{search.strip()}%"))
        if status is not None:
            query = query.filter(Vocabulary.status == status)
        if is_deleted is not None:
            query = query.filter(Vocabulary.is_deleted == is_deleted)
        if topic_id:
            query = query.filter(Vocabulary.topic_id == topic_id)

        total = query.count()
        vocabularies = (
            query.options(
                selectinload(Vocabulary.meanings)
                .selectinload(Meaning.definitions)
            )
            .order_by(Vocabulary.created_at.desc(), Vocabulary.word)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return vocabularies, total

    @handle_db_errors
    def list_active_ids(self) -> List[str]:
        """Get the IDs of all vocabularies that are not soft-deleted."""
        rows = self.db.query(Vocabulary.id).filter(
            Vocabulary.deleted_at.is_(None)
        ).all()
        return [row.id for row in rows]

    @handle_db_errors
    def update(
        self,
        vocabulary: Vocabulary,
        fields: dict,
        meanings: Optional[List[dict]] = None
    ) -> Vocabulary:
        """
        Update scalar fields and optionally replace the meaning tree.

        Args:
            vocabulary: Vocabulary to update
            fields: Column values keyed by name (see VOCABULARY_FIELDS)
            meanings: New meanings replacing all existing ones

        Returns:
            Updated vocabulary
        """
        try:
            for name, value in fields.items():
                if name not in VOCABULARY_FIELDS:
                    continue
                if isinstance(value, str):
                    value = value.strip()
                setattr(vocabulary, name, value)

            if meanings:
                # delete-orphan cascade removes the old tree
                vocabulary.meanings = self._build_meanings(meanings)

            vocabulary.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(vocabulary)
            logger.debug(f"Updated vocabulary {vocabulary.id}")
            return vocabulary
        except IntegrityError:
            self.db.rollback()
            raise DuplicateVocabularyError(vocabulary.word)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update vocabulary {vocabulary.id}: {e}")
            raise

    @handle_db_errors
    def set_deleted(self, vocabulary: Vocabulary, deleted: bool) -> Vocabulary:
        """
        Soft-delete or restore a vocabulary.

        Args:
            vocabulary: Vocabulary to change
            deleted: True to soft-delete, False to restore

        Returns:
            Updated vocabulary
        """
        try:
            now = datetime.utcnow()
            vocabulary.is_deleted = deleted
            vocabulary.deleted_at = now if deleted else None
            vocabulary.updated_at = now
            self.db.commit()
            self.db.refresh(vocabulary)
            return vocabulary
        except IntegrityError:
            self.db.rollback()
            raise DuplicateVocabularyError(vocabulary.word)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to change deletion state of {vocabulary.id}: {e}")
            raise

    @handle_db_errors
    def delete(self, vocabulary: Vocabulary) -> None:
        """Permanently delete a vocabulary and its tree."""
        try:
            self.db.delete(vocabulary)
            self.db.commit()
            logger.info(f"Permanently deleted vocabulary {vocabulary.id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete vocabulary {vocabulary.id}: {e}")
            raise

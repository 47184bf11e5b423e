"""
Bulk vocabulary import.

Drives each spreadsheet row through validation, topic and duplicate
checks, dictionary and image enrichment and an atomic write, isolating
failures per row. Once every row is settled, the missing translations
of all written vocabularies are filled by a single batch translation.
"""

from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from repositories.topic_repository import TopicRepository
from repositories.vocabulary_repository import VocabularyRepository
from services.dictionary_client import DictionaryClient, DictionaryEntry
from services.image_client import ImageClient
from services.row_parser import ImportRow, ParsedRow, RowParser
from services.translation_batcher import TranslationBatcher
from utils.error_handling import (
    DuplicateVocabularyError, TopicNotFoundError, VocabdeskError
)
from logger_config import logger


DUPLICATE = "duplicate"


class RowOutcome(BaseModel):
    """Result of importing one row."""

    word: str
    status: Literal["success", "failed"]
    vocabulary_id: Optional[str] = Field(default=None, serialization_alias="vocabularyId")
    error: Optional[str] = None


class ImportSummary(BaseModel):
    """Aggregated result of an import."""

    success: int = 0
    failed: int = 0
    details: List[RowOutcome] = []

    @property
    def vocabulary_ids(self) -> List[str]:
        return [
            outcome.vocabulary_id for outcome in self.details
            if outcome.status == "success" and outcome.vocabulary_id
        ]

    def add(self, outcome: RowOutcome) -> None:
        self.details.append(outcome)
        if outcome.status == "success":
            self.success += 1
        else:
            self.failed += 1


def build_meanings(
    word: str,
    translation: Optional[str],
    entry: Optional[DictionaryEntry]
) -> List[dict]:
    """
    Build the meaning tree for a new vocabulary.

    Dictionary meanings without any usable definition are dropped. When
    nothing usable remains, a single 'noun' meaning is synthesized whose
    definition is the word itself, translated with the row translation,
    so every vocabulary has at least one meaning with one definition.

    Args:
        word: Imported word
        translation: Translation supplied by the row
        entry: Dictionary entry, if the lookup found one

    Returns:
        Meaning dicts for VocabularyRepository.create_tree
    """
    meanings = []
    for meaning in (entry.meanings if entry else []):
        definitions = [
            {
                "definition": d.definition,
                "translation": "",
                "example": d.example,
                "example_translation": "",
            }
            for d in meaning.definitions
            if d.definition and d.definition.strip()
        ]
        if not definitions:
            continue
        meanings.append({
            "part_of_speech": meaning.part_of_speech,
            "synonyms": meaning.synonyms,
            "antonyms": meaning.antonyms,
            "definitions": definitions,
        })

    if not meanings:
        meanings.append({
            "part_of_speech": "noun",
            "synonyms": [],
            "antonyms": [],
            "definitions": [{
                "definition": word,
                "translation": translation or "",
                "example": "",
                "example_translation": "",
            }],
        })
    return meanings


class VocabularyImportService:
    """Imports vocabularies from spreadsheet rows."""

    def __init__(
        self,
        db: Session,
        dictionary_client: DictionaryClient,
        image_client: ImageClient,
        translation_batcher: TranslationBatcher,
        row_parser: Optional[RowParser] = None
    ):
        """
        Initialize service.

        Args:
            db: Database session
            dictionary_client: Word enrichment lookup
            image_client: Image lookup
            translation_batcher: Batch translator run after all rows
            row_parser: Spreadsheet parser
        """
        self.db = db
        self.topic_repo = TopicRepository(db)
        self.vocabulary_repo = VocabularyRepository(db)
        self.dictionary_client = dictionary_client
        self.image_client = image_client
        self.translation_batcher = translation_batcher
        self.row_parser = row_parser or RowParser()

    def import_file(
        self,
        content: bytes,
        filename: str,
        created_by: Optional[str] = None
    ) -> ImportSummary:
        """
        Import an uploaded spreadsheet.

        Args:
            content: Raw file bytes
            filename: Original file name
            created_by: Id of the importing user

        Returns:
            Import summary

        Raises:
            InvalidImportFileError: the file itself cannot be read
        """
        rows = self.row_parser.parse(content, filename)
        return self.import_rows(rows, created_by=created_by)

    def import_rows(
        self,
        rows: Iterable[ParsedRow],
        created_by: Optional[str] = None
    ) -> ImportSummary:
        """
        Import parsed rows one by one, then translate in one batch.

        Args:
            rows: Parsed rows
            created_by: Id of the importing user

        Returns:
            Import summary
        """
        summary = ImportSummary()

        for parsed in rows:
            if parsed is None or not parsed.word:
                continue
            if parsed.error or parsed.row is None:
                logger.info(f"Row '{parsed.word}' rejected: {parsed.error}")
                summary.add(RowOutcome(
                    word=parsed.word,
                    status="failed",
                    error=parsed.error or "invalid row"
                ))
                continue
            summary.add(self._import_row(parsed.row, created_by))

        written = summary.vocabulary_ids
        if written:
            try:
                self.translation_batcher.translate_vocabularies(written)
            except Exception as e:
                logger.error(
                    f"Batch translation after import failed, {len(written)} "
                    f"vocabularies left untranslated: {e}",
                    exc_info=True
                )

        logger.info(
            f"Import finished: {summary.success} succeeded, {summary.failed} failed"
        )
        return summary

    def _import_row(self, row: ImportRow, created_by: Optional[str]) -> RowOutcome:
        """Run one valid row through checks, enrichment and the write."""
        word = row.word
        try:
            if not self.topic_repo.exists_active(row.topic_id):
                raise TopicNotFoundError(row.topic_id)

            if self.vocabulary_repo.exists_word(word):
                raise DuplicateVocabularyError(word)

            # No transaction stays open across the network lookups
            self.db.commit()

            entry = self._lookup_dictionary(word)
            image_url = self._lookup_image(word)

            vocabulary = self.vocabulary_repo.create_tree(
                word=word,
                topic_id=row.topic_id,
                meanings=build_meanings(word, row.translation, entry),
                translation=row.translation,
                phonetic=entry.phonetic if entry else "",
                image_url=image_url,
                audio_url_us=entry.audio_url_us if entry else "",
                audio_url_uk=entry.audio_url_uk if entry else "",
                audio_url_au=entry.audio_url_au if entry else "",
                created_by=created_by
            )
        except TopicNotFoundError:
            logger.info(f"Row '{word}' rejected: unknown topic {row.topic_id}")
            return RowOutcome(word=word, status="failed",
                              error=f"topic not found: {row.topic_id}")
        except DuplicateVocabularyError:
            logger.info(f"Row '{word}' rejected: already exists")
            return RowOutcome(word=word, status="failed", error=DUPLICATE)
        except VocabdeskError as e:
            logger.warning(f"Row '{word}' failed: {e.message}")
            return RowOutcome(word=word, status="failed", error=f"write failed: {e.message}")
        except Exception as e:
            logger.error(f"Unexpected error importing '{word}': {e}", exc_info=True)
            return RowOutcome(word=word, status="failed", error=f"write failed: {e}")

        return RowOutcome(word=word, status="success", vocabulary_id=vocabulary.id)

    def _lookup_dictionary(self, word: str) -> Optional[DictionaryEntry]:
        try:
            return self.dictionary_client.lookup(word)
        except Exception as e:
            logger.warning(f"Dictionary lookup raised for '{word}', continuing without it: {e}")
            return None

    def _lookup_image(self, word: str) -> str:
        try:
            return self.image_client.lookup(word) or ""
        except Exception as e:
            logger.warning(f"Image lookup raised for '{word}', continuing without it: {e}")
            return ""

"""
Batch translation of definitions and examples.

Every definition/example text that still lacks a translation is joined
into one payload with a sentinel delimiter and sent to the translation
backend in a single call. The response is split on the same delimiter
and mapped back to its source fields strictly by position.

Translation is additive: only empty fields are filled, so running the
batcher again over the same vocabularies performs no updates. Backend
failures and malformed responses leave fields untranslated and are
never raised to the caller.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from config import settings
from models import Definition, Vocabulary
from repositories.definition_repository import DefinitionRepository
from services.translation_client import TranslationClient
from utils.error_handling import VocabdeskError
from logger_config import logger


@dataclass
class TranslationUnit:
    """One field of one definition waiting for a translation."""

    definition_id: str
    field: str  # 'translation' or 'example_translation'
    source_text: str


def collect_units(definitions: Iterable[Definition]) -> List[TranslationUnit]:
    """
    Collect the fields that still need a translation.

    Args:
        definitions: Definitions in scope

    Returns:
        Units in definition order, 'translation' before 'example_translation'
    """
    units = []
    for definition in definitions:
        if not (definition.translation or "").strip() and (definition.definition or "").strip():
            units.append(TranslationUnit(definition.id, "translation", definition.definition))
        if not (definition.example_translation or "").strip() and (definition.example or "").strip():
            units.append(TranslationUnit(definition.id, "example_translation", definition.example))
    return units


def join_texts(texts: List[str], delimiter: str) -> str:
    """Join texts with the delimiter on its own line."""
    return f"\n{delimiter}\n".join(texts)


def split_response(
    response: str,
    delimiter: str,
    expected: Optional[int] = None
) -> List[str]:
    """
    Split a backend response into trimmed segments.

    Every segment keeps its position, empty ones included. Only when
    there are more segments than expected are empty segments at the
    ends treated as stray delimiters, and only if removing them
    unambiguously yields exactly the expected count.

    Args:
        response: Raw backend response
        delimiter: Sentinel used for the request
        expected: Number of texts that were sent

    Returns:
        Segments in order
    """
    segments = [segment.strip() for segment in (response or "").strip().split(delimiter)]
    if expected is None or len(segments) <= expected:
        return segments

    extra = len(segments) - expected
    leading = next((i for i, s in enumerate(segments) if s), len(segments))
    trailing = next((i for i, s in enumerate(reversed(segments)) if s), len(segments))

    if leading == 0 and trailing >= extra:
        return segments[:len(segments) - extra]
    if trailing == 0 and leading >= extra:
        return segments[extra:]
    if leading + trailing == extra:
        return segments[leading:len(segments) - trailing]
    return segments


class TranslationBatcher:
    """Translates missing definition fields with one backend call per batch."""

    def __init__(
        self,
        db: Session,
        client: Optional[TranslationClient],
        delimiter: Optional[str] = None
    ):
        """
        Initialize batcher.

        Args:
            db: Database session
            client: Translation backend; None disables translation
            delimiter: Sentinel separating batch items
        """
        self.client = client
        self.delimiter = delimiter or settings.translation_delimiter
        self.definition_repo = DefinitionRepository(db)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def translate_vocabulary(self, vocabulary: Vocabulary) -> int:
        """
        Translate the missing fields of one loaded vocabulary tree.

        Args:
            vocabulary: Vocabulary with meanings and definitions

        Returns:
            Number of definitions updated
        """
        definitions = [
            definition
            for meaning in vocabulary.meanings or []
            for definition in meaning.definitions or []
        ]
        return self.translate_definitions(definitions)

    def translate_vocabularies(self, vocabulary_ids: List[str]) -> int:
        """
        Translate the missing fields of several vocabularies at once.

        Args:
            vocabulary_ids: Vocabulary IDs

        Returns:
            Number of definitions updated
        """
        if not self.enabled or not vocabulary_ids:
            return 0
        definitions = self.definition_repo.get_by_vocabulary_ids(list(vocabulary_ids))
        return self.translate_definitions(definitions)

    def translate_definitions(self, definitions: Iterable[Definition]) -> int:
        """
        Translate the missing fields of the given definitions.

        Args:
            definitions: Definitions in scope

        Returns:
            Number of definitions updated
        """
        if not self.enabled:
            return 0

        units = collect_units(definitions)
        if not units:
            logger.debug("Nothing to translate")
            return 0

        translations = self.batch_translate([unit.source_text for unit in units])
        return self._apply(units, translations)

    def batch_translate(self, texts: List[str]) -> List[str]:
        """
        Translate texts with a single backend call.

        Args:
            texts: Source texts

        Returns:
            List aligned with texts; '' where no translation was obtained
        """
        results = [""] * len(texts)
        if not self.enabled:
            return results

        valid = [
            (index, text.strip())
            for index, text in enumerate(texts)
            if text and text.strip()
        ]
        if not valid:
            return results

        payload = join_texts([text for _, text in valid], self.delimiter)
        try:
            response = self.client.translate_batch(payload, self.delimiter)
        except VocabdeskError as e:
            logger.warning(f"Batch translation of {len(valid)} text(s) failed: {e.message}")
            return results
        except Exception as e:
            logger.error(f"Unexpected batch translation failure: {e}", exc_info=True)
            return results

        segments = split_response(response, self.delimiter, expected=len(valid))
        if len(segments) > len(valid):
            logger.warning(
                f"Translation response has {len(segments)} segments for "
                f"{len(valid)} texts, discarding it"
            )
            return results
        if len(segments) < len(valid):
            logger.warning(
                f"Translation response has only {len(segments)} segments for "
                f"{len(valid)} texts, trailing texts stay untranslated"
            )

        for (index, _), segment in zip(valid, segments):
            if segment:
                results[index] = segment
        return results

    def _apply(self, units: List[TranslationUnit], translations: List[str]) -> int:
        """Write translations back, one update per definition."""
        updates = OrderedDict()
        for unit, value in zip(units, translations):
            if value:
                updates.setdefault(unit.definition_id, {})[unit.field] = value

        updated = 0
        for definition_id, fields in updates.items():
            try:
                if self.definition_repo.update_translations(definition_id, fields):
                    updated += 1
            except VocabdeskError as e:
                logger.error(f"Could not save translations for definition {definition_id}: {e.message}")

        logger.info(
            f"Batch translation filled {sum(len(f) for f in updates.values())} of "
            f"{len(units)} field(s) across {updated} definition(s)"
        )
        return updated

"""
Repository for definition translation operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from models import Definition, Meaning
from utils.error_handling import handle_db_errors
from logger_config import logger


TRANSLATION_FIELDS = ("translation", "example_translation")


class DefinitionRepository:
    """Repository for definition operations."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    @handle_db_errors
    def get_by_vocabulary_ids(self, vocabulary_ids: List[str]) -> List[Definition]:
        """
        Get every definition belonging to the given vocabularies.

        Args:
            vocabulary_ids: Vocabulary IDs

        Returns:
            Definitions in vocabulary, meaning and definition order
        """
        if not vocabulary_ids:
            return []

        order = {vocabulary_id: i for i, vocabulary_id in enumerate(vocabulary_ids)}
        rows = (
            self.db.query(Definition, Meaning.vocabulary_id)
            .join(Meaning, Definition.meaning_id == Meaning.id)
            .filter(Meaning.vocabulary_id.in_(vocabulary_ids))
            .order_by(Meaning.position, Definition.position)
            .all()
        )
        # Keep the caller's vocabulary order for a stable batch layout
        rows.sort(key=lambda row: order.get(row[1], len(order)))
        return [definition for definition, _ in rows]

    @handle_db_errors
    def update_translations(self, definition_id: str, updates: dict) -> bool:
        """
        Fill empty translation fields of one definition.

        Fields that already hold a value are never overwritten.

        Args:
            definition_id: Definition ID
            updates: Values keyed by 'translation' / 'example_translation'

        Returns:
            True if at least one field was written
        """
        try:
            definition: Optional[Definition] = self.db.query(Definition).filter(
                Definition.id == definition_id
            ).first()
            if not definition:
                logger.warning(f"Definition {definition_id} vanished before translation update")
                return False

            changed = False
            for field in TRANSLATION_FIELDS:
                value = (updates.get(field) or "").strip()
                if value and not (getattr(definition, field) or "").strip():
                    setattr(definition, field, value)
                    changed = True

            if changed:
                self.db.commit()
            return changed
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update translations of definition {definition_id}: {e}")
            raise

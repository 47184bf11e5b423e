"""
Topic repository for database operations.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Topic
from utils.error_handling import ValidationError, handle_db_errors
from utils.text_utils import normalize_text, slugify
from logger_config import logger


class TopicRepository:
    """Repository for topic operations."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: Database session
        """
        self.db = db

    @handle_db_errors
    def create(
        self,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        status: bool = True,
        created_by: Optional[str] = None
    ) -> Topic:
        """
        Create a new topic.

        Args:
            name: Topic name, unique case-insensitively
            slug: Optional slug, derived from the name when omitted
            description: Optional description
            image_url: Optional cover image
            status: Active flag
            created_by: Id of the creating user

        Returns:
            Created topic object
        """
        normalized_name = normalize_text(name or "")
        if not normalized_name:
            raise ValidationError("Topic name is required")

        duplicate = self.db.query(Topic).filter(
            func.lower(Topic.name) == normalized_name.lower()
        ).first()
        if duplicate:
            raise ValidationError(f"Topic name already exists: {normalized_name}")

        try:
            topic = Topic(
                name=normalized_name,
                slug=slugify(slug or normalized_name),
                description=description,
                image_url=image_url,
                status=status,
                created_by=created_by
            )
            self.db.add(topic)
            self.db.commit()
            self.db.refresh(topic)
            logger.debug(f"Created topic {topic.id}: '{topic.name}'")
            return topic
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create topic: {e}")
            raise

    @handle_db_errors
    def get_by_id(self, topic_id: str) -> Optional[Topic]:
        """Get topic by ID, including soft-deleted ones."""
        return self.db.query(Topic).filter(Topic.id == topic_id).first()

    @handle_db_errors
    def exists_active(self, topic_id: str) -> bool:
        """
        Check that a topic exists and is not soft-deleted.

        Args:
            topic_id: Topic ID

        Returns:
            True if the topic can be referenced
        """
        if not topic_id:
            return False
        return self.db.query(Topic.id).filter(
            Topic.id == topic_id,
            Topic.deleted_at.is_(None)
        ).first() is not None

    @handle_db_errors
    def list(
        self,
        limit: int,
        offset: int = 0,
        search: Optional[str] = None,
        is_deleted: Optional[bool] = None
    ) -> Tuple[List[Topic], int]:
        """
        List topics, newest first.

        Returns:
            Tuple of (page of topics, total matching)
        """
        query = self.db.query(Topic)
        if search:
            query = query.filter(Topic.name.ilike(f"%{search}%"))
        if is_deleted is not None:
            query = query.filter(Topic.is_deleted == is_deleted)

        total = query.count()
        topics = (
            query.order_by(Topic.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return topics, total

    @handle_db_errors
    def set_deleted(self, topic: Topic, deleted: bool) -> Topic:
        """Soft-delete or restore a topic."""
        try:
            topic.is_deleted = deleted
            topic.deleted_at = datetime.utcnow() if deleted else None
            self.db.commit()
            self.db.refresh(topic)
            return topic
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update topic {topic.id}: {e}")
            raise

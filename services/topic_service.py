"""
Topic service for business logic operations.
"""

import math
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from models import Topic
from repositories.topic_repository import TopicRepository
from utils.error_handling import TopicNotFoundError, ValidationError


class TopicService:
    """Service for topic operations."""

    def __init__(self, db: Session):
        """
        Initialize service with database session.

        Args:
            db: Database session
        """
        self.topic_repo = TopicRepository(db)

    def create(self, data: dict, created_by: Optional[str] = None) -> Topic:
        """Create a topic from request data."""
        return self.topic_repo.create(
            name=data.get("name"),
            slug=data.get("slug"),
            description=data.get("description"),
            image_url=data.get("image_url"),
            status=data.get("status", True) is not False,
            created_by=created_by
        )

    def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        is_deleted: Optional[bool] = None
    ) -> dict:
        """List topics with pagination meta."""
        page = max(page or 1, 1)
        limit = min(max(limit or settings.page_size_default, 1), settings.page_size_max)
        topics, total = self.topic_repo.list(
            limit=limit,
            offset=(page - 1) * limit,
            search=search,
            is_deleted=is_deleted
        )
        return {
            "topics": topics,
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "page_count": math.ceil(total / limit) or 1,
            }
        }

    def get(self, topic_id: str) -> Topic:
        """Get a topic or raise TopicNotFoundError."""
        topic = self.topic_repo.get_by_id(topic_id)
        if not topic:
            raise TopicNotFoundError(topic_id)
        return topic

    def delete(self, topic_id: str) -> None:
        """Soft-delete a topic. Its vocabularies stay untouched."""
        self.topic_repo.set_deleted(self.get(topic_id), True)

    def restore(self, topic_id: str) -> None:
        """Restore a soft-deleted topic."""
        topic = self.get(topic_id)
        if topic.deleted_at is None:
            raise ValidationError(f"Topic {topic_id} is not deleted")
        self.topic_repo.set_deleted(topic, False)

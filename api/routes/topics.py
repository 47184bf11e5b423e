"""
Admin topic API routes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services.topic_service import TopicService
from api.models.schemas import (
    MessageSchema, TopicCreateSchema, TopicListSchema, TopicSchema
)

router = APIRouter()


@router.post("", response_model=TopicSchema, status_code=201)
def create_topic(
    payload: TopicCreateSchema,
    db: Session = Depends(get_db)
):
    """Create a topic."""
    return TopicService(db).create(payload.model_dump())


@router.get("", response_model=TopicListSchema)
def list_topics(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Name contains"),
    is_deleted: Optional[bool] = Query(None, description="Soft-delete flag"),
    db: Session = Depends(get_db)
) -> dict:
    """List topics, newest first."""
    return TopicService(db).list(
        page=page, limit=limit, search=search, is_deleted=is_deleted
    )


@router.get("/{topic_id}", response_model=TopicSchema)
def get_topic(topic_id: str, db: Session = Depends(get_db)):
    """Get a topic by ID."""
    return TopicService(db).get(topic_id)


@router.delete("/{topic_id}", response_model=MessageSchema)
def delete_topic(topic_id: str, db: Session = Depends(get_db)) -> dict:
    """Soft-delete a topic."""
    TopicService(db).delete(topic_id)
    return {"message": "Topic deleted"}


@router.put("/{topic_id}/restore", response_model=MessageSchema)
def restore_topic(topic_id: str, db: Session = Depends(get_db)) -> dict:
    """Restore a soft-deleted topic."""
    TopicService(db).restore(topic_id)
    return {"message": "Topic restored"}

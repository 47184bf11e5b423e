"""
Pydantic schemas for API request/response models.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from services.vocabulary_import_service import ImportSummary


class PaginationMetaSchema(BaseModel):
    """Pagination metadata."""

    total: int
    page: int
    limit: int
    page_count: int


class TopicCreateSchema(BaseModel):
    """Topic create request."""

    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    status: bool = True


class TopicSchema(BaseModel):
    """Topic schema."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    status: bool
    is_deleted: bool
    created_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class TopicListSchema(BaseModel):
    """Page of topics."""

    topics: List[TopicSchema]
    meta: PaginationMetaSchema


class DefinitionInSchema(BaseModel):
    """Definition in a create/update request."""

    definition: str
    translation: Optional[str] = None
    example: Optional[str] = None
    example_translation: Optional[str] = None


class MeaningInSchema(BaseModel):
    """Meaning in a create/update request."""

    part_of_speech: str = "noun"
    synonyms: List[str] = []
    antonyms: List[str] = []
    definitions: List[DefinitionInSchema]


class VocabularyCreateSchema(BaseModel):
    """Vocabulary create request."""

    word: str
    topic_id: str
    translation: Optional[str] = None
    phonetic: Optional[str] = None
    image_url: Optional[str] = None
    audio_url_us: Optional[str] = None
    audio_url_uk: Optional[str] = None
    audio_url_au: Optional[str] = None
    status: bool = True
    meanings: List[MeaningInSchema]


class VocabularyUpdateSchema(BaseModel):
    """Vocabulary partial update request."""

    word: Optional[str] = None
    topic_id: Optional[str] = None
    translation: Optional[str] = None
    phonetic: Optional[str] = None
    image_url: Optional[str] = None
    audio_url_us: Optional[str] = None
    audio_url_uk: Optional[str] = None
    audio_url_au: Optional[str] = None
    status: Optional[bool] = None
    meanings: Optional[List[MeaningInSchema]] = None


class DefinitionSchema(BaseModel):
    """Definition schema."""

    id: str
    definition: str
    translation: Optional[str] = None
    example: Optional[str] = None
    example_translation: Optional[str] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class MeaningSchema(BaseModel):
    """Meaning schema."""

    id: str
    part_of_speech: str
    synonyms: List[str] = []
    antonyms: List[str] = []
    definitions: List[DefinitionSchema] = []

    class Config:
        """Pydantic config."""

        from_attributes = True


class VocabularySchema(BaseModel):
    """Vocabulary with its meanings."""

    id: str
    word: str
    translation: Optional[str] = None
    phonetic: Optional[str] = None
    image_url: Optional[str] = None
    audio_url_us: Optional[str] = None
    audio_url_uk: Optional[str] = None
    audio_url_au: Optional[str] = None
    status: bool
    topic_id: str
    is_deleted: bool
    created_at: Optional[datetime] = None
    meanings: List[MeaningSchema] = []

    class Config:
        """Pydantic config."""

        from_attributes = True


class VocabularyListSchema(BaseModel):
    """Page of vocabularies."""

    vocabularies: List[VocabularySchema]
    meta: PaginationMetaSchema


class VocabularyResponseSchema(BaseModel):
    """Single vocabulary with a status message."""

    message: Optional[str] = None
    vocabulary: VocabularySchema


class MessageSchema(BaseModel):
    """Plain status message."""

    message: str


class ImportResponseSchema(BaseModel):
    """Bulk import response."""

    message: str
    results: ImportSummary


class TranslateRequestSchema(BaseModel):
    """Explicit re-translation request."""

    vocabulary_ids: List[str] = Field(..., min_length=1)


class TranslateResponseSchema(BaseModel):
    """Re-translation result."""

    updated: int

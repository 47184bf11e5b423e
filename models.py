"""
Database models for Vocabdesk.

Defines SQLAlchemy models for topics and the vocabulary tree
(vocabulary -> meanings -> definitions).
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, Integer, String, Text, ForeignKey, TIMESTAMP, Index,
    JSON, func
)
from sqlalchemy.orm import relationship

from database import Base


PARTS_OF_SPEECH = (
    "noun", "verb", "adjective", "adverb", "pronoun", "preposition",
    "conjunction", "interjection", "determiner", "article", "numeral",
)


def generate_id() -> str:
    """Generate a new primary key."""
    return str(uuid.uuid4())


class Topic(Base):
    """Vocabulary topic (food, travel, ...)."""

    __tablename__ = "topics"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)
    status = Column(Boolean, default=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(TIMESTAMP, nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    # Relationships
    vocabularies = relationship("Vocabulary", back_populates="topic")

    def __repr__(self) -> str:
        return f"<Topic(id={self.id}, name='{self.name}')>"


class Vocabulary(Base):
    """Vocabulary word with enrichment data."""

    __tablename__ = "vocabularies"

    id = Column(String(36), primary_key=True, default=generate_id)
    word = Column(String(255), nullable=False, index=True)
    translation = Column(Text, nullable=True)
    phonetic = Column(String(255), nullable=True)
    image_url = Column(String(1000), nullable=True)
    audio_url_us = Column(String(1000), nullable=True)
    audio_url_uk = Column(String(1000), nullable=True)
    audio_url_au = Column(String(1000), nullable=True)
    status = Column(Boolean, default=True, nullable=False)
    topic_id = Column(String(36), ForeignKey("topics.id"), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(TIMESTAMP, nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    # Relationships
    topic = relationship("Topic", back_populates="vocabularies")
    meanings = relationship(
        "Meaning",
        back_populates="vocabulary",
        cascade="all, delete-orphan",
        order_by="Meaning.position"
    )

    # One active row per word, case-insensitive
    __table_args__ = (
        Index(
            "uq_vocabularies_word_active",
            func.lower(word),
            unique=True,
            postgresql_where=deleted_at.is_(None),
            sqlite_where=deleted_at.is_(None),
        ),
        Index("idx_vocabularies_topic", "topic_id"),
    )

    def __repr__(self) -> str:
        return f"<Vocabulary(id={self.id}, word='{self.word}')>"


class Meaning(Base):
    """One part-of-speech sense of a vocabulary word."""

    __tablename__ = "meanings"

    id = Column(String(36), primary_key=True, default=generate_id)
    vocabulary_id = Column(
        String(36),
        ForeignKey("vocabularies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position = Column(Integer, default=0, nullable=False)
    part_of_speech = Column(String(32), default="noun", nullable=False)
    synonyms = Column(JSON, default=list, nullable=False)
    antonyms = Column(JSON, default=list, nullable=False)

    # Relationships
    vocabulary = relationship("Vocabulary", back_populates="meanings")
    definitions = relationship(
        "Definition",
        back_populates="meaning",
        cascade="all, delete-orphan",
        order_by="Definition.position"
    )

    def __repr__(self) -> str:
        return f"<Meaning(id={self.id}, " \
               f"part_of_speech='{self.part_of_speech}')>"


class Definition(Base):
    """Definition of a meaning, with its example and translations."""

    __tablename__ = "definitions"

    id = Column(String(36), primary_key=True, default=generate_id)
    meaning_id = Column(
        String(36),
        ForeignKey("meanings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position = Column(Integer, default=0, nullable=False)
    definition = Column(Text, nullable=False)
    translation = Column(Text, default="", nullable=True)
    example = Column(Text, default="", nullable=True)
    example_translation = Column(Text, default="", nullable=True)

    # Relationships
    meaning = relationship("Meaning", back_populates="definitions")

    def __repr__(self) -> str:
        preview = self.definition[:50] + "..." if len(self.definition) > 50 \
            else self.definition
        return f"<Definition(id={self.id}, definition='{preview}')>"

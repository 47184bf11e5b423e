"""
Pytest configuration and fixtures.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("TRANSLATION_PROVIDER", "none")
os.environ.setdefault("UNSPLASH_ACCESS_KEY", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from models import Topic
from services.translation_batcher import TranslationBatcher
from services.vocabulary_import_service import VocabularyImportService
from tests.fakes import FakeDictionaryClient, FakeImageClient, FakeTranslationClient


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def engine():
    """In-memory database shared by every connection of one test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """
    Create a test database session.

    Yields:
        Database session
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sample_topic(db_session):
    """Create a sample topic for testing."""
    topic = Topic(name="Fruit", slug="fruit")
    db_session.add(topic)
    db_session.commit()
    db_session.refresh(topic)
    return topic


@pytest.fixture
def dictionary_client():
    """Dictionary fake with no entries."""
    return FakeDictionaryClient()


@pytest.fixture
def image_client():
    """Image fake returning predictable URLs."""
    return FakeImageClient()


@pytest.fixture
def translation_client():
    """Translation fake prefixing every segment with 'vi:'."""
    return FakeTranslationClient()


@pytest.fixture
def import_service(db_session, dictionary_client, image_client, translation_client):
    """Import service wired to the fakes."""
    return VocabularyImportService(
        db_session,
        dictionary_client,
        image_client,
        TranslationBatcher(db_session, translation_client)
    )

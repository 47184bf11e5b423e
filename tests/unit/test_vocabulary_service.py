"""
Unit tests for manual vocabulary management.
"""

import pytest
from sqlalchemy.orm import Session

from models import Definition, Meaning, Vocabulary
from services.topic_service import TopicService
from services.translation_batcher import TranslationBatcher
from services.vocabulary_service import VocabularyService
from tests.fakes import FakeTranslationClient
from utils.error_handling import (
    DuplicateVocabularyError, TopicNotFoundError, ValidationError,
    VocabularyNotFoundError
)


@pytest.fixture
def vocabulary_service(db_session: Session, translation_client):
    return VocabularyService(db_session, TranslationBatcher(db_session, translation_client))


def vocabulary_data(topic_id: str, word: str = "apple", **overrides) -> dict:
    data = {
        "word": word,
        "translation": "quả táo",
        "topic_id": topic_id,
        "meanings": [{
            "part_of_speech": "Noun",
            "synonyms": ["pome"],
            "definitions": [
                {"definition": "A round fruit.", "example": "I ate an apple."},
                {"definition": "   "},
            ],
        }],
    }
    data.update(overrides)
    return data


def test_create_translates_and_normalizes(vocabulary_service, sample_topic, translation_client):
    vocabulary = vocabulary_service.create(vocabulary_data(sample_topic.id), created_by="admin")

    assert vocabulary.word == "apple"
    assert vocabulary.created_by == "admin"
    meaning = vocabulary.meanings[0]
    assert meaning.part_of_speech == "noun"
    assert meaning.synonyms == ["pome"]
    assert len(meaning.definitions) == 1
    assert meaning.definitions[0].translation == "vi:A round fruit."
    assert meaning.definitions[0].example_translation == "vi:I ate an apple."
    assert len(translation_client.calls) == 1


def test_create_requires_a_word(vocabulary_service, sample_topic):
    with pytest.raises(ValidationError):
        vocabulary_service.create(vocabulary_data(sample_topic.id, word="  "))


def test_create_requires_meanings(vocabulary_service, sample_topic):
    with pytest.raises(ValidationError):
        vocabulary_service.create(vocabulary_data(sample_topic.id, meanings=[]))


def test_create_rejects_meaning_without_definitions(vocabulary_service, sample_topic):
    data = vocabulary_data(sample_topic.id, meanings=[{"part_of_speech": "verb", "definitions": []}])

    with pytest.raises(ValidationError):
        vocabulary_service.create(data)


def test_create_rejects_unknown_topic(vocabulary_service):
    with pytest.raises(TopicNotFoundError):
        vocabulary_service.create(vocabulary_data("nope"))


def test_create_rejects_duplicate(vocabulary_service, sample_topic):
    vocabulary_service.create(vocabulary_data(sample_topic.id))

    with pytest.raises(DuplicateVocabularyError):
        vocabulary_service.create(vocabulary_data(sample_topic.id, word="APPLE"))


def test_list_paginates_and_filters(vocabulary_service, sample_topic):
    for word in ("apple", "apricot", "banana"):
        vocabulary_service.create(vocabulary_data(sample_topic.id, word=word))

    result = vocabulary_service.list(page=1, limit=2)
    assert result["meta"] == {"total": 3, "page": 1, "limit": 2, "page_count": 2}
    assert len(result["vocabularies"]) == 2

    result = vocabulary_service.list(search="AP")
    assert sorted(v.word for v in result["vocabularies"]) == ["apple", "apricot"]


def test_list_limit_is_capped(vocabulary_service):
    result = vocabulary_service.list(limit=100000)

    assert result["meta"]["limit"] == 100
    assert result["meta"]["page_count"] == 1


def test_get_unknown_raises(vocabulary_service):
    with pytest.raises(VocabularyNotFoundError):
        vocabulary_service.get("missing")


def test_update_scalar_fields(vocabulary_service, sample_topic):
    created = vocabulary_service.create(vocabulary_data(sample_topic.id))

    updated = vocabulary_service.update(created.id, {"translation": " táo ", "status": False})

    assert updated.translation == "táo"
    assert updated.status is False
    assert len(updated.meanings) == 1


def test_update_to_taken_word_is_rejected(vocabulary_service, sample_topic):
    vocabulary_service.create(vocabulary_data(sample_topic.id, word="apple"))
    pear = vocabulary_service.create(vocabulary_data(sample_topic.id, word="pear"))

    with pytest.raises(DuplicateVocabularyError):
        vocabulary_service.update(pear.id, {"word": "Apple"})


def test_update_replaces_and_translates_meanings(vocabulary_service, db_session, sample_topic):
    created = vocabulary_service.create(vocabulary_data(sample_topic.id))

    updated = vocabulary_service.update(created.id, {"meanings": [{
        "part_of_speech": "verb",
        "definitions": [{"definition": "To pick apples."}],
    }]})

    assert [m.part_of_speech for m in updated.meanings] == ["verb"]
    assert updated.meanings[0].definitions[0].translation == "vi:To pick apples."
    assert db_session.query(Meaning).count() == 1
    assert db_session.query(Definition).count() == 1


def test_update_without_data_is_rejected(vocabulary_service, sample_topic):
    created = vocabulary_service.create(vocabulary_data(sample_topic.id))

    with pytest.raises(ValidationError):
        vocabulary_service.update(created.id, {})


def test_soft_delete_restore_and_force_delete(vocabulary_service, db_session, sample_topic):
    created = vocabulary_service.create(vocabulary_data(sample_topic.id))

    with pytest.raises(ValidationError):
        vocabulary_service.force_delete(created.id)

    vocabulary_service.delete(created.id)
    deleted = vocabulary_service.get(created.id)
    assert deleted.is_deleted is True
    assert deleted.deleted_at is not None

    vocabulary_service.restore(created.id)
    restored = vocabulary_service.get(created.id)
    assert restored.is_deleted is False
    assert restored.deleted_at is None

    vocabulary_service.delete(created.id)
    vocabulary_service.force_delete(created.id)
    assert db_session.query(Vocabulary).count() == 0
    assert db_session.query(Meaning).count() == 0
    assert db_session.query(Definition).count() == 0


def test_restore_is_blocked_by_newer_word(vocabulary_service, sample_topic):
    old = vocabulary_service.create(vocabulary_data(sample_topic.id))
    vocabulary_service.delete(old.id)
    vocabulary_service.create(vocabulary_data(sample_topic.id))

    with pytest.raises(DuplicateVocabularyError):
        vocabulary_service.restore(old.id)


def test_restore_of_active_vocabulary_is_rejected(vocabulary_service, sample_topic):
    created = vocabulary_service.create(vocabulary_data(sample_topic.id))

    with pytest.raises(ValidationError):
        vocabulary_service.restore(created.id)


def test_retranslate_fills_only_missing(db_session, sample_topic):
    service = VocabularyService(db_session, TranslationBatcher(db_session, None))
    created = service.create(vocabulary_data(sample_topic.id))
    assert created.meanings[0].definitions[0].translation == ""

    translator = FakeTranslationClient()
    service = VocabularyService(db_session, TranslationBatcher(db_session, translator))

    assert service.retranslate([created.id]) == 1
    assert service.retranslate([created.id]) == 0
    assert len(translator.calls) == 1


def test_retranslate_requires_ids(vocabulary_service):
    with pytest.raises(ValidationError):
        vocabulary_service.retranslate([])


def test_topic_service_lifecycle(db_session):
    service = TopicService(db_session)

    assert service.create({"name": "Đồ ăn"}).slug == "do-an"

    topic = service.create({"name": "Food"})
    with pytest.raises(ValidationError):
        service.create({"name": "FOOD"})

    service.delete(topic.id)
    assert service.get(topic.id).is_deleted is True
    service.restore(topic.id)
    assert service.get(topic.id).deleted_at is None

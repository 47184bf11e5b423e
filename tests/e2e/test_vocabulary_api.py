"""
End-to-end tests for the admin vocabulary and topic API.

Runs the FastAPI app against the in-memory test database with the
external clients replaced by fakes.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import (
    get_dictionary_client, get_image_client, get_translation_client
)
from api.main import app
from database import get_db
from tests.fakes import FakeDictionaryClient, FakeImageClient, FakeTranslationClient, make_entry


@pytest.fixture
def fakes():
    return {
        "dictionary": FakeDictionaryClient({"apple": make_entry("apple")}),
        "image": FakeImageClient(),
        "translation": FakeTranslationClient(),
    }


@pytest.fixture
def client(session_factory, fakes):
    """Test client wired to the test database and fakes."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dictionary_client] = lambda: fakes["dictionary"]
    app.dependency_overrides[get_image_client] = lambda: fakes["image"]
    app.dependency_overrides[get_translation_client] = lambda: fakes["translation"]
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def topic_id(client):
    response = client.post("/api/admin/topics", json={"name": "Fruit"})
    assert response.status_code == 201
    return response.json()["id"]


def upload(client, content: bytes, filename: str = "words.csv"):
    return client.post(
        "/api/admin/vocabularies/import",
        files={"file": (filename, content, "text/csv")}
    )


def test_health(client):
    from config import settings

    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["translation"]["provider"] == settings.translation_provider
    assert body["translation"]["target_language"] == settings.translation_target_language
    assert isinstance(body["translation"]["enabled"], bool)


def test_import_reports_per_row_results(client, topic_id, fakes):
    content = (
        "word,translation,topicId\n"
        f"apple,quả táo,{topic_id}\n"
        f",x,{topic_id}\n"
        f"apple,quả táo,{topic_id}\n"
        "pear,lê,unknown\n"
    ).encode("utf-8")

    response = upload(client, content)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Import completed with 1 succeeded, 2 failed"
    results = body["results"]
    assert results["success"] == 1
    assert results["failed"] == 2
    apple, duplicate, pear = results["details"]
    assert apple["status"] == "success"
    assert "vocabularyId" in apple
    assert "error" not in apple
    assert duplicate == {"word": "apple", "status": "failed", "error": "duplicate"}
    assert pear["error"] == "topic not found: unknown"
    assert len(fakes["translation"].calls) == 1

    vocabulary = client.get(f"/api/admin/vocabularies/{apple['vocabularyId']}").json()["vocabulary"]
    assert vocabulary["image_url"] == "https://images.example/apple.jpg"
    definition = vocabulary["meanings"][0]["definitions"][0]
    assert definition["translation"] == f"vi:{definition['definition']}"


def test_import_all_failed_message(client):
    response = upload(client, b"word,topicId\napple,nope\n")

    assert response.json()["message"] == "Import failed - all rows failed"


def test_import_rejects_unsupported_file(client):
    response = upload(client, b"hello", filename="words.txt")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_IMPORT_FILE"


def test_import_rejects_missing_word_column(client):
    response = upload(client, b"name,topicId\napple,t\n")

    assert response.status_code == 400
    assert "word" in response.json()["error"]["message"]


def test_vocabulary_crud_flow(client, topic_id):
    payload = {
        "word": "plum",
        "topic_id": topic_id,
        "translation": "quả mận",
        "meanings": [{
            "part_of_speech": "noun",
            "definitions": [{"definition": "A small fruit.", "example": "A ripe plum."}],
        }],
    }

    created = client.post("/api/admin/vocabularies", json=payload)
    assert created.status_code == 201
    vocabulary = created.json()["vocabulary"]
    assert vocabulary["meanings"][0]["definitions"][0]["translation"] == "vi:A small fruit."

    duplicate = client.post("/api/admin/vocabularies", json={**payload, "word": "PLUM"})
    assert duplicate.status_code == 409

    listed = client.get("/api/admin/vocabularies", params={"search": "pl"}).json()
    assert listed["meta"]["total"] == 1

    patched = client.patch(
        f"/api/admin/vocabularies/{vocabulary['id']}", json={"phonetic": "/plʌm/"}
    )
    assert patched.json()["vocabulary"]["phonetic"] == "/plʌm/"

    assert client.delete(f"/api/admin/vocabularies/{vocabulary['id']}").status_code == 200
    assert client.get(
        "/api/admin/vocabularies", params={"is_deleted": False}
    ).json()["meta"]["total"] == 0

    assert client.put(f"/api/admin/vocabularies/{vocabulary['id']}/restore").status_code == 200
    assert client.delete(f"/api/admin/vocabularies/{vocabulary['id']}/force").status_code == 400

    client.delete(f"/api/admin/vocabularies/{vocabulary['id']}")
    assert client.delete(f"/api/admin/vocabularies/{vocabulary['id']}/force").status_code == 200
    assert client.get(f"/api/admin/vocabularies/{vocabulary['id']}").status_code == 404


def test_create_with_unknown_topic_is_404(client):
    response = client.post("/api/admin/vocabularies", json={
        "word": "plum",
        "topic_id": "missing",
        "meanings": [{"definitions": [{"definition": "A fruit."}]}],
    })

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TOPIC_NOT_FOUND"


def test_translate_endpoint(client, topic_id, fakes):
    fakes["translation"].fail = True
    created = client.post("/api/admin/vocabularies", json={
        "word": "plum",
        "topic_id": topic_id,
        "meanings": [{"definitions": [{"definition": "A fruit."}]}],
    }).json()["vocabulary"]
    assert created["meanings"][0]["definitions"][0]["translation"] == ""

    fakes["translation"].fail = False
    response = client.post(
        "/api/admin/vocabularies/translate", json={"vocabulary_ids": [created["id"]]}
    )

    assert response.json() == {"updated": 1}


def test_translate_requires_ids(client):
    response = client.post("/api/admin/vocabularies/translate", json={"vocabulary_ids": []})

    assert response.status_code == 422


def test_topic_soft_delete_blocks_import(client, topic_id):
    assert client.delete(f"/api/admin/topics/{topic_id}").status_code == 200

    response = upload(client, f"word,topicId\napple,{topic_id}\n".encode("utf-8"))

    assert response.json()["results"]["details"][0]["error"] == f"topic not found: {topic_id}"

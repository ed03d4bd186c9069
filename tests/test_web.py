"""Tests for the segmentation web API."""

import pytest

from speedread_web import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"ok": True}


def test_segment_payload(client):
    response = client.post(
        "/api/segment",
        json={
            "text": "The quick brown fox jumps",
            "chunk_size": 3,
            "smart_chunking": False,
            "wpm": 300,
        },
    )
    assert response.status_code == 200
    data = response.get_json()

    assert data["ok"] is True
    assert data["words"] == ["The", "quick", "brown", "fox", "jumps"]
    assert data["chunks"] == [["The", "quick", "brown"], ["fox", "jumps"]]
    assert data["bionic"][1] == {"bold": "qu", "normal": "ick", "original": "quick"}
    assert data["focus_indices"] == [1, 1, 1, 1, 1]
    assert data["word_count"] == 5
    assert data["chunk_count"] == 2
    assert data["char_count"] == 25
    assert data["word_delay_ms"] == pytest.approx(200.0)
    assert data["chunk_delay_ms"] == pytest.approx(600.0)
    assert data["estimated_seconds"] == pytest.approx(1.0)


def test_segment_phrase_chunking_with_languages(client):
    response = client.post(
        "/api/segment",
        json={"text": "Kitap okudum ve uyudum", "chunk_size": 4, "languages": ["tr"]},
    )
    assert response.status_code == 200
    assert response.get_json()["chunks"] == [["Kitap", "okudum"], ["ve", "uyudum"]]


def test_segment_clamps_speed(client):
    response = client.post("/api/segment", json={"text": "a b", "wpm": 10})
    data = response.get_json()
    assert data["wpm"] >= 1
    assert data["word_delay_ms"] == pytest.approx(60000.0 / data["wpm"])


def test_segment_smart_chunking_false_chunks_mechanically(client):
    response = client.post(
        "/api/segment",
        json={"text": "the cat and the dog ran", "chunk_size": 3, "smart_chunking": False},
    )
    assert response.status_code == 200
    assert response.get_json()["chunks"] == [["the", "cat", "and"], ["the", "dog", "ran"]]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"text": "   "},
        {"text": 42},
        {"text": "hello", "chunk_size": 0},
        {"text": "hello", "chunk_size": "three"},
        {"text": "hello", "wpm": True},
        {"text": "hello", "languages": "en"},
        {"text": "hello", "smart_chunking": "false"},
        {"text": "hello", "smart_chunking": 0},
    ],
)
def test_segment_rejects_bad_requests(client, body):
    response = client.post("/api/segment", json=body)
    assert response.status_code == 400
    data = response.get_json()
    assert data["ok"] is False
    assert data["error"]


def test_segment_rejects_non_json(client):
    response = client.post("/api/segment", data="not json", content_type="text/plain")
    assert response.status_code == 400

"""Tests for the FastAPI application routes."""
from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from wordquiz import app as app_module
from wordquiz.app import app
from wordquiz.config import Settings
from wordquiz.db import Database


def question_json(correct: str = "A") -> str:
    return json.dumps({
        "paragraph": "P",
        "question": "Q",
        "options": {"A": "x", "B": "y", "C": "z", "D": "w"},
        "correct_answer": correct,
        "explanation": "e",
    })


class FakeLLM:
    """Fake LLM that fails for prompts mentioning any word in ``fail_on``."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.fail_on = fail_on
        self.calls = 0

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        self.calls += 1
        if any(f"Word: {w}\n" in prompt for w in self.fail_on):
            raise RuntimeError("503 Service Unavailable")
        return question_json()

    def name(self) -> str:
        return "fake-llm"


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def test_app(tmp_path, fake_llm):
    """Set up test app with temporary database and settings."""
    db = Database(tmp_path / "test.db")
    settings = Settings(db_path=str(tmp_path / "test.db"), word_files=[], pacing_seconds=0)

    # Set globals BEFORE creating TestClient so startup() is a no-op
    app_module._db = db
    app_module._settings = settings

    with patch("wordquiz.app.save_settings"), \
         patch("wordquiz.app._get_llm", return_value=fake_llm):
        client = TestClient(app, raise_server_exceptions=False)
        yield client, db, settings
        client.close()

    db.close()
    app_module._db = None
    app_module._settings = None


@pytest.fixture
def test_app_with_data(test_app, sample_words):
    client, db, settings = test_app
    db.import_words(sample_words)
    return client, db, settings


class TestHealthAPI:
    def test_health(self, test_app):
        client, _, _ = test_app
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "OK"
        assert data["version"] == "1.0.0"
        assert data["uptime"].endswith("seconds")

    def test_ping(self, test_app):
        client, _, _ = test_app
        resp = client.get("/api/health/ping")
        assert resp.status_code == 200
        assert resp.text == "pong"


class TestWordsAPI:
    def test_empty(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/words").json()
        assert data["words"] == []
        assert data["total"] == 0

    def test_lists_active_words_with_counts(self, test_app_with_data):
        client, _, _ = test_app_with_data
        data = client.get("/api/words").json()
        assert data["total"] == 3
        assert [w["word"] for w in data["words"]] == ["abandon", "brief", "candid"]
        assert data["words"][0]["question_count"] == 0
        assert "english_example" in data["words"][0]


class TestGenerateAPI:
    def test_success(self, test_app_with_data, fake_llm):
        client, db, _ = test_app_with_data
        resp = client.post("/api/questions/generate", json={"wordIds": [1, 2]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["summary"] == {
            "total_requested": 2, "successful": 2, "failed": 0, "success_rate": "100.0%",
        }
        assert "errors" not in data
        assert fake_llm.calls == 2
        assert db.get_question_count() == 2

    def test_partial_failure(self, test_app_with_data, fake_llm):
        client, db, _ = test_app_with_data
        fake_llm.fail_on = ("brief",)
        resp = client.post("/api/questions/generate", json={"wordIds": [1, 2, 3]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["summary"] == {
            "total_requested": 3, "successful": 2, "failed": 1, "success_rate": "66.7%",
        }
        assert [r["status"] for r in data["results"]] == ["success", "failure", "success"]
        assert data["errors"][0]["word"] == "brief"
        assert "503" in data["errors"][0]["error"]
        assert db.get_question_count() == 2

    @pytest.mark.parametrize("body", [
        {"wordIds": []},
        {"wordIds": "1,2"},
        {},
        {"wordIds": list(range(1, 52))},
        [1, 2],
    ])
    def test_invalid_request(self, test_app_with_data, fake_llm, body):
        client, _, _ = test_app_with_data
        resp = client.post("/api/questions/generate", json=body)
        assert resp.status_code == 400
        assert fake_llm.calls == 0

    def test_limit_named_in_error(self, test_app_with_data):
        client, _, _ = test_app_with_data
        resp = client.post("/api/questions/generate", json={"wordIds": list(range(1, 52))})
        assert "50" in resp.json()["detail"]

    def test_non_json_body(self, test_app_with_data):
        client, _, _ = test_app_with_data
        resp = client.post("/api/questions/generate", content=b"not json",
                           headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    def test_not_found(self, test_app_with_data, fake_llm):
        client, _, _ = test_app_with_data
        resp = client.post("/api/questions/generate", json={"wordIds": [4, 99]})
        assert resp.status_code == 404
        assert fake_llm.calls == 0

    def test_setup_failure_is_500(self, test_app_with_data):
        client, db, _ = test_app_with_data
        with patch.object(db, "get_active_words_by_ids", side_effect=RuntimeError("db unreachable")):
            resp = client.post("/api/questions/generate", json={"wordIds": [1]})
        assert resp.status_code == 500
        assert resp.json()["message"] == "db unreachable"

    def test_id_beyond_sqlite_range_is_400(self, test_app_with_data, fake_llm):
        client, _, _ = test_app_with_data
        resp = client.post("/api/questions/generate", json={"wordIds": [2 ** 70]})
        assert resp.status_code == 400
        assert "out of range" in resp.json()["detail"]
        assert fake_llm.calls == 0

    def test_missing_ids_reported(self, test_app_with_data):
        client, _, _ = test_app_with_data
        data = client.post("/api/questions/generate", json={"wordIds": [1, 99]}).json()
        assert data["missing_word_ids"] == [99]

    def test_question_counts_update(self, test_app_with_data):
        client, _, _ = test_app_with_data
        client.post("/api/questions/generate", json={"wordIds": [2]})
        words = {w["word"]: w for w in client.get("/api/words").json()["words"]}
        assert words["brief"]["question_count"] == 1


class TestQuestionsAPI:
    def test_list(self, test_app_with_data):
        client, _, _ = test_app_with_data
        client.post("/api/questions/generate", json={"wordIds": [1, 2]})
        data = client.get("/api/questions").json()
        assert data["total"] == 2
        data = client.get("/api/questions", params={"word_id": 2}).json()
        assert data["total"] == 1
        assert data["questions"][0]["word"] == "brief"


class TestDatabaseInfoAPI:
    def test_info(self, test_app_with_data):
        client, _, _ = test_app_with_data
        data = client.get("/api/database-info").json()
        assert data["success"] is True
        assert data["words_table"]["total_rows"] == 4
        assert data["questions_table"]["total_rows"] == 0
        assert "correct_answer" in data["questions_table"]["columns"]


class TestLLMCheckAPI:
    def test_ok(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/test-llm").json()
        assert data["success"] is True
        assert data["provider"] == "fake-llm"

    def test_failure(self, test_app, fake_llm):
        client, _, _ = test_app
        with patch.object(fake_llm, "generate", side_effect=RuntimeError("no key")):
            resp = client.get("/api/test-llm")
        assert resp.status_code == 500
        assert "no key" in resp.json()["detail"]


class TestImportAPI:
    def test_import_configured_files(self, test_app, tmp_path):
        client, db, settings = test_app
        f = tmp_path / "words.md"
        f.write_text("| Word | Meaning |\n|---|---|\n| brief | short |\n| candid | frank |\n")
        settings.word_files = [str(f)]
        data = client.post("/api/import").json()
        assert data["words_imported"] == 2
        assert data["files"] == ["words.md"]
        assert db.get_word_count() == 2


class TestSettingsAPI:
    def test_get_settings(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/settings").json()
        assert data["llm_provider"] == "gemini"
        assert data["pacing_seconds"] == 0

    def test_update_settings(self, test_app):
        client, _, settings = test_app
        data = client.put("/api/settings", json={"pacing_seconds": 2.0, "bogus": 1}).json()
        assert data["pacing_seconds"] == 2.0
        assert settings.pacing_seconds == 2.0
        assert "bogus" not in data

    @pytest.mark.parametrize("body", [
        {"pacing_seconds": "1"},
        {"llm_temperature": True},
        {"llm_provider": 3},
        {"word_files": "words.md"},
        {"word_files": [1]},
    ])
    def test_update_rejects_wrong_types(self, test_app, body):
        client, _, settings = test_app
        resp = client.put("/api/settings", json={"default_difficulty": "advanced", **body})
        assert resp.status_code == 400
        assert settings.pacing_seconds == 0
        assert settings.default_difficulty == "intermediate"

    def test_update_accepts_int_for_float(self, test_app):
        client, _, settings = test_app
        data = client.put("/api/settings", json={"pacing_seconds": 3}).json()
        assert data["pacing_seconds"] == 3.0
        assert isinstance(settings.pacing_seconds, float)

    def test_generation_after_rejected_update_runs_whole_batch(self, test_app_with_data):
        client, db, _ = test_app_with_data
        client.put("/api/settings", json={"pacing_seconds": "1"})
        resp = client.post("/api/questions/generate", json={"wordIds": [1, 2, 3]})
        assert resp.status_code == 200
        assert resp.json()["summary"]["successful"] == 3
        assert db.get_question_count() == 3

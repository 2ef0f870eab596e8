import pytest
from fastapi.testclient import TestClient

from main import create_app
from workout_ai.ai.engine import AIEngine
from workout_ai.ai.providers import MockProvider, RemoteProvider
from workout_ai.ai.types import AIResponse
from workout_ai.api.dependencies import get_ai_engine
from workout_ai.core import messages


class CannedProvider:
    name = "remote"

    def __init__(self, response):
        self.response = response

    @property
    def is_available(self):
        return True

    async def initialize(self, config=None):
        pass

    async def complete(self, request):
        return self.response

    async def test_connection(self):
        return True


@pytest.fixture
def api_engine():
    return AIEngine(mock=MockProvider(latency_ms=0), remote=RemoteProvider(), provider="mock")


@pytest.fixture
def client(api_engine):
    app = create_app()
    app.dependency_overrides[get_ai_engine] = lambda: api_engine
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_status_hides_api_key(client, api_engine, remote_config):
    api_engine.configure_remote(remote_config)

    body = client.get("/api/v1/ai/status").json()

    assert body["provider"] == "mock"
    assert body["has_api_key"] is True
    assert body["remote_available"] is True
    assert "sk-test" not in str(body)
    assert body["features"]["aggressiveness"] == "balanced"


def test_patch_settings(client, api_engine):
    response = client.patch(
        "/api/v1/ai/settings",
        json={"provider": "remote", "api_url": "https://api.example.test/v1", "api_key": "sk-x", "auto_suggestions": False},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["provider"] == "remote"
    assert body["has_api_key"] is True
    assert body["features"]["auto_suggestions"] is False
    assert api_engine.remote.config.api_key == "sk-x"


def test_patch_settings_rejects_unknown_provider(client):
    response = client.patch("/api/v1/ai/settings", json={"provider": "openai"})

    assert response.status_code == 422


def test_complete_returns_envelope(client):
    response = client.post(
        "/api/v1/ai/complete",
        json={"type": "analysis", "prompt": "Analiza mi semana", "options": {"temperature": 0.2}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {"summary": "Mock analysis result", "insights": []}
    assert body["cached"] is False
    assert body["usage"]["prompt_tokens"] == 4


def test_complete_failure_is_still_200(client, api_engine):
    api_engine.set_enabled(False)

    response = client.post("/api/v1/ai/complete", json={"type": "analysis", "prompt": "x"})

    assert response.status_code == 200
    assert response.json()["error"] == "AI is disabled"
    assert response.json()["error_kind"] == "disabled"


def test_complete_rejects_unknown_type(client):
    response = client.post("/api/v1/ai/complete", json={"type": "chat", "prompt": "x"})

    assert response.status_code == 422


def test_feature_disabled_is_403(client, api_engine):
    api_engine.apply_settings(template_generation=False)

    response = client.post("/api/v1/ai/templates", json={"description": "fuerza"})

    assert response.status_code == 403
    assert response.json()["detail"] == messages.FEATURE_TEMPLATE_GENERATION_DISABLED


def test_provider_none_is_403(client, api_engine):
    api_engine.set_provider("none")

    response = client.post("/api/v1/ai/analysis", json={"session_data": "x"})

    assert response.status_code == 403


def test_empty_description_is_400(client):
    response = client.post("/api/v1/ai/templates", json={"description": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == messages.TEMPLATE_DESCRIPTION_REQUIRED


def test_quota_error_is_502_with_friendly_message(client):
    remote = CannedProvider(AIResponse.fail("API Error 429: quota exceeded", "non_retryable"))
    engine = AIEngine(mock=MockProvider(latency_ms=0), remote=remote, provider="remote")
    client.app.dependency_overrides[get_ai_engine] = lambda: engine

    response = client.post("/api/v1/ai/exercise-suggestions", json={"current_exercise_names": []})

    assert response.status_code == 502
    assert response.json()["detail"] == messages.AI_QUOTA_EXCEEDED


def test_load_prediction(client):
    response = client.post(
        "/api/v1/ai/load-predictions",
        json={
            "exercise_id": "e1",
            "exercise_name": "Sentadilla",
            "athlete_id": "a1",
            "previous_weight": 100,
            "previous_reps": 12,
            "target_reps": 10,
            "recent_history": [{"weight": 100, "reps": 12, "date": "2026-10-01"}],
        },
    )

    assert response.status_code == 200
    assert response.json()["data"]["suggestedWeight"] == 102.5


def test_logs_list_and_clear(client):
    client.post("/api/v1/ai/complete", json={"type": "analysis", "prompt": "x"})

    logs = client.get("/api/v1/ai/logs").json()
    assert len(logs) == 1
    assert logs[0]["provider"] == "mock"
    assert logs[0]["type"] == "response"

    assert client.delete("/api/v1/ai/logs").status_code == 204
    assert client.get("/api/v1/ai/logs").json() == []


def test_connection_and_self_test(client):
    assert client.post("/api/v1/ai/test-connection").json() == {"success": True, "provider": "mock"}

    body = client.post("/api/v1/ai/self-test").json()
    assert body["success"] is True
    assert body["provider"] == "mock"


def test_null_feature_data_is_502(client):
    engine = AIEngine(mock=MockProvider(latency_ms=0), remote=CannedProvider(AIResponse.ok(None)), provider="remote")
    client.app.dependency_overrides[get_ai_engine] = lambda: engine

    response = client.post("/api/v1/ai/analysis", json={"session_data": "x"})

    assert response.status_code == 502
    assert response.json()["detail"] == messages.ANALYSIS_FAILED

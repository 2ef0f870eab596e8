import pytest

from workout_ai.ai.providers import MockProvider
from workout_ai.ai.types import AIRequest, RequestType


@pytest.mark.asyncio
async def test_suggestions_are_deterministic(mock_provider):
    request = AIRequest(type=RequestType.SUGGESTION, prompt="Sugiere ejercicios")

    first = await mock_provider.complete(request)
    second = await mock_provider.complete(request)

    assert first.success is True
    assert first.cached is False
    assert first.data == second.data
    assert 3 <= len(first.data) <= 5
    assert first.data[0]["name"] == "Press de Banca"


@pytest.mark.asyncio
async def test_suggestions_skip_current_exercises(mock_provider):
    response = await mock_provider.complete(
        AIRequest(
            type=RequestType.SUGGESTION,
            prompt="Sugiere ejercicios",
            context={"currentExercises": ["Press de Banca", "Sentadilla"]},
        )
    )

    names = [exercise["name"] for exercise in response.data]
    assert "Press de Banca" not in names
    assert "Sentadilla" not in names


@pytest.mark.asyncio
async def test_suggestions_prioritize_prompt_muscle_group(mock_provider):
    response = await mock_provider.complete(
        AIRequest(type=RequestType.SUGGESTION, prompt="Quiero más trabajo de hombro")
    )

    assert [e["muscleGroup"] for e in response.data[:2]] == ["shoulders", "shoulders"]


@pytest.mark.asyncio
async def test_strength_upper_template(mock_provider):
    response = await mock_provider.complete(
        AIRequest(type=RequestType.GENERATION, prompt="Rutina de fuerza para pecho")
    )

    template = response.data
    assert template["name"] == "Rutina De Fuerza Para"
    assert template["difficulty"] == "advanced"
    assert template["tags"] == ["fuerza", "upper-body"]
    assert [e["name"] for e in template["exercises"]] == ["Press de Banca", "Remo con Barra", "Press Militar"]
    assert template["exercises"][0]["sets"] == 5
    assert template["exercises"][0]["reps"] == 5
    assert template["exercises"][0]["restSeconds"] == 150
    assert template["estimatedDuration"] == 45
    assert template["description"].startswith("Rutina de fuerza enfocada en tren superior.")


@pytest.mark.asyncio
async def test_default_template(mock_provider):
    response = await mock_provider.complete(AIRequest(type=RequestType.GENERATION, prompt="algo"))

    assert len(response.data["exercises"]) == 4
    assert response.data["tags"] == ["general"]
    assert response.data["difficulty"] == "intermediate"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "previous_reps, expected_weight, trend",
    [
        (12, 102.5, "increasing"),
        (10, 100.0, "stable"),
        (7, 95.0, "decreasing"),
    ],
)
async def test_load_prediction_trends(mock_provider, previous_reps, expected_weight, trend):
    response = await mock_provider.complete(
        AIRequest(
            type=RequestType.PREDICTION,
            prompt="predict",
            context={"previousWeight": 100, "previousReps": previous_reps, "targetReps": 10, "previousSets": 3},
        )
    )

    assert response.data["suggestedWeight"] == expected_weight
    assert response.data["suggestedReps"] == 10
    assert response.data["confidence"] == 0.75
    assert response.data["basedOn"] == {"previousSets": 3, "trend": trend}


@pytest.mark.asyncio
async def test_load_prediction_without_history(mock_provider):
    response = await mock_provider.complete(AIRequest(type=RequestType.PREDICTION, prompt="predict"))

    assert response.data["suggestedWeight"] == 0
    assert response.data["confidence"] == 0.3
    assert response.data["reasoning"] == "Sin datos previos, sugerencia inicial"


@pytest.mark.asyncio
async def test_analysis_and_usage(mock_provider):
    response = await mock_provider.complete(AIRequest(type=RequestType.ANALYSIS, prompt="x" * 40))

    assert response.data == {"summary": "Mock analysis result", "insights": []}
    assert response.usage.prompt_tokens == 10


@pytest.mark.asyncio
async def test_unknown_request_type(mock_provider):
    response = await mock_provider.complete(AIRequest(type="bogus", prompt="x"))

    assert response.success is False
    assert response.error == "Unknown request type: bogus"


@pytest.mark.asyncio
async def test_mock_is_always_available(mock_provider):
    assert mock_provider.is_available is True
    assert await mock_provider.test_connection() is True


def test_default_latency():
    assert MockProvider().latency_ms == 800

"""Feature entry points used by the application: template generation,
load prediction, exercise suggestions, analysis and the engine self-test.

Each one checks the global switch and its own feature flag before building
a request, so a disabled feature never reaches the engine.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from workout_ai.ai import prompts
from workout_ai.ai.engine import AIEngine
from workout_ai.ai.errors import ErrorKind
from workout_ai.ai.types import AIRequest, AIResponse, RequestOptions, RequestType
from workout_ai.core import messages

T = TypeVar("T")


@dataclass(frozen=True)
class FeatureResult(Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    disabled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


@dataclass(frozen=True)
class PredictionContext:
    exercise_id: str
    exercise_name: str
    athlete_id: str
    previous_weight: Optional[float] = None
    previous_reps: Optional[int] = None
    target_reps: Optional[int] = None
    previous_sets: Optional[int] = None
    recent_history: Sequence[Mapping[str, Any]] = field(default_factory=tuple)


@dataclass(frozen=True)
class SuggestionContext:
    current_exercise_names: Sequence[str] = field(default_factory=tuple)
    session_type: Optional[str] = None
    session_goal: Optional[str] = None


@dataclass(frozen=True)
class SelfTestResult:
    success: bool
    provider: str
    duration_ms: int
    data: Any = None
    error: Optional[str] = None


def _from_response(response: AIResponse[Any], fallback_error: str) -> FeatureResult[Any]:
    if response.success:
        if response.data is not None:
            return FeatureResult(data=response.data)
        return FeatureResult(error=fallback_error, error_kind=ErrorKind.EMPTY_RESPONSE.value)
    return FeatureResult(
        error=response.error or fallback_error,
        error_kind=response.error_kind or ErrorKind.UNKNOWN.value,
    )


async def generate_template(engine: AIEngine, description: str) -> FeatureResult[Dict[str, Any]]:
    if not (engine.enabled and engine.features.template_generation):
        return FeatureResult(error=messages.FEATURE_TEMPLATE_GENERATION_DISABLED, disabled=True)
    if not description.strip():
        return FeatureResult(error=messages.TEMPLATE_DESCRIPTION_REQUIRED)

    request = AIRequest(
        type=RequestType.GENERATION,
        prompt=prompts.template_generation_prompt(description),
        options=RequestOptions(temperature=0.7, max_tokens=1500),
    )
    return _from_response(await engine.complete(request), messages.TEMPLATE_GENERATION_FAILED)


async def predict_load(engine: AIEngine, context: PredictionContext) -> FeatureResult[Dict[str, Any]]:
    if not (engine.enabled and engine.features.load_prediction):
        return FeatureResult(error=messages.FEATURE_LOAD_PREDICTION_DISABLED, disabled=True)

    request = AIRequest(
        type=RequestType.PREDICTION,
        prompt=prompts.load_prediction_prompt(
            exercise_name=context.exercise_name,
            previous_weight=context.previous_weight,
            previous_reps=context.previous_reps,
            target_reps=context.target_reps,
            recent_history=context.recent_history,
        ),
        context={
            "exerciseId": context.exercise_id,
            "athleteId": context.athlete_id,
            "previousWeight": context.previous_weight,
            "previousReps": context.previous_reps,
            "targetReps": context.target_reps,
            "previousSets": context.previous_sets,
        },
        # Lower temperature keeps predictions close to deterministic
        options=RequestOptions(temperature=0.3, max_tokens=300),
    )
    return _from_response(await engine.complete(request), messages.LOAD_PREDICTION_FAILED)


async def suggest_exercises(engine: AIEngine, context: SuggestionContext) -> FeatureResult[List[Dict[str, Any]]]:
    if not (engine.enabled and engine.features.exercise_suggestions):
        return FeatureResult(error=messages.FEATURE_AI_DISABLED, disabled=True)

    request = AIRequest(
        type=RequestType.SUGGESTION,
        prompt=prompts.exercise_suggestion_prompt(
            current_exercise_names=context.current_exercise_names,
            session_type=context.session_type,
            session_goal=context.session_goal,
        ),
        context={
            "currentExercises": list(context.current_exercise_names),
            "sessionType": context.session_type,
        },
        options=RequestOptions(temperature=0.7, max_tokens=500),
    )
    return _from_response(await engine.complete(request), messages.EXERCISE_SUGGESTIONS_FAILED)


async def analyze(engine: AIEngine, session_data: str, context: Optional[Mapping[str, Any]] = None) -> FeatureResult[Dict[str, Any]]:
    if not engine.enabled:
        return FeatureResult(error=messages.FEATURE_AI_DISABLED, disabled=True)

    request = AIRequest(
        type=RequestType.ANALYSIS,
        prompt=prompts.session_analysis_prompt(session_data),
        context=context,
    )
    return _from_response(await engine.complete(request), messages.ANALYSIS_FAILED)


async def run_self_test(engine: AIEngine) -> SelfTestResult:
    start_time = time.time()
    response = await engine.complete(
        AIRequest(
            type=RequestType.GENERATION,
            prompt=prompts.SELF_TEST_PROMPT,
            options=RequestOptions(temperature=0.7, max_tokens=500),
        )
    )
    duration_ms = int((time.time() - start_time) * 1000)
    provider = engine.status().provider
    if response.success:
        return SelfTestResult(success=True, provider=provider, duration_ms=duration_ms, data=response.data)
    return SelfTestResult(
        success=False,
        provider=provider,
        duration_ms=duration_ms,
        error=response.error or messages.SELF_TEST_FAILED,
    )

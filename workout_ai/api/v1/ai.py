"""AI engine endpoints consumed by the coaching UI."""

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from workout_ai.ai import features
from workout_ai.ai.engine import AIEngine
from workout_ai.ai.errors import ErrorKind, is_quota_error
from workout_ai.ai.types import AIRequest, AIResponse, RequestOptions, RequestType
from workout_ai.api.dependencies import get_ai_engine
from workout_ai.core import messages


router = APIRouter(prefix="/ai", tags=["ai"])


# Pydantic Schemas
class CompletionOptions(BaseModel):
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, ge=1)


class CompletionRequest(BaseModel):
    """Schema for a raw engine completion."""
    type: RequestType
    prompt: str
    context: Optional[Dict[str, Any]] = None
    options: Optional[CompletionOptions] = None


class UsageResponse(BaseModel):
    prompt_tokens: int
    completion_tokens: int


class CompletionResponse(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    usage: Optional[UsageResponse] = None
    cached: bool = False


class FeatureFlagsResponse(BaseModel):
    template_generation: bool
    load_prediction: bool
    exercise_suggestions: bool
    auto_suggestions: bool
    show_inline_hints: bool
    aggressiveness: str


class AIStatusResponse(BaseModel):
    """Engine status (hides API key)."""
    enabled: bool
    provider: str
    remote_available: bool
    api_url: Optional[str]
    model: Optional[str]
    has_api_key: bool  # Don't expose the actual key
    features: FeatureFlagsResponse


class AISettingsUpdate(BaseModel):
    """Schema for updating engine settings."""
    enabled: Optional[bool] = None
    provider: Optional[Literal["mock", "remote", "none"]] = None
    api_url: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    template_generation: Optional[bool] = None
    load_prediction: Optional[bool] = None
    exercise_suggestions: Optional[bool] = None
    auto_suggestions: Optional[bool] = None
    show_inline_hints: Optional[bool] = None
    aggressiveness: Optional[Literal["minimal", "balanced", "proactive"]] = None


class ConnectionTestResponse(BaseModel):
    success: bool
    provider: str


class SelfTestResponse(BaseModel):
    success: bool
    provider: str
    duration_ms: int
    data: Any = None
    error: Optional[str] = None


class AILogEntryResponse(BaseModel):
    id: str
    timestamp: str
    type: str
    provider: str
    request_type: str
    success: bool
    details: Optional[str] = None
    duration_ms: Optional[int] = None
    token_usage: Optional[int] = None


class TemplateGenerationRequest(BaseModel):
    description: str


class HistoryEntry(BaseModel):
    weight: float
    reps: int
    rpe: Optional[float] = None
    date: str


class LoadPredictionRequest(BaseModel):
    exercise_id: str
    exercise_name: str
    athlete_id: str
    previous_weight: Optional[float] = None
    previous_reps: Optional[int] = None
    target_reps: Optional[int] = None
    previous_sets: Optional[int] = None
    recent_history: List[HistoryEntry] = []


class ExerciseSuggestionRequest(BaseModel):
    current_exercise_names: List[str] = []
    session_type: Optional[str] = None
    session_goal: Optional[str] = None


class AnalysisRequest(BaseModel):
    session_data: str
    context: Optional[Dict[str, Any]] = None


class FeatureResponse(BaseModel):
    data: Any


def _status_response(engine: AIEngine) -> AIStatusResponse:
    engine_status = engine.status()
    config = engine.remote.config
    flags = engine.features
    return AIStatusResponse(
        enabled=engine_status.enabled,
        provider=engine_status.provider,
        remote_available=engine_status.remote_available,
        api_url=config.api_url if config else None,
        model=config.model if config else None,
        has_api_key=bool(config and config.api_key),
        features=FeatureFlagsResponse(
            template_generation=flags.template_generation,
            load_prediction=flags.load_prediction,
            exercise_suggestions=flags.exercise_suggestions,
            auto_suggestions=flags.auto_suggestions,
            show_inline_hints=flags.show_inline_hints,
            aggressiveness=flags.aggressiveness,
        ),
    )


def _completion_response(response: AIResponse[Any]) -> CompletionResponse:
    usage = None
    if response.usage is not None:
        usage = UsageResponse(
            prompt_tokens=response.usage.prompt_tokens,
            completion_tokens=response.usage.completion_tokens,
        )
    return CompletionResponse(
        success=response.success,
        data=response.data,
        error=response.error,
        error_kind=response.error_kind,
        usage=usage,
        cached=response.cached,
    )


def _feature_response(result: features.FeatureResult[Any]) -> FeatureResponse:
    if result.disabled:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result.error)
    if result.error is not None and result.error_kind is None:
        # Rejected before reaching the engine (e.g. empty description)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    if result.error is not None:
        if result.error_kind == ErrorKind.DISABLED.value:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result.error)
        detail = messages.AI_QUOTA_EXCEEDED if is_quota_error(result.error) else result.error
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    return FeatureResponse(data=result.data)


@router.get("/status", response_model=AIStatusResponse)
def get_status(engine: AIEngine = Depends(get_ai_engine)):
    """Current provider, kill switch and feature flags."""
    return _status_response(engine)


@router.patch("/settings", response_model=AIStatusResponse)
def update_settings(payload: AISettingsUpdate, engine: AIEngine = Depends(get_ai_engine)):
    """Apply a partial settings update to the engine."""
    engine.apply_settings(**payload.model_dump(exclude_unset=True))
    return _status_response(engine)


@router.post("/complete", response_model=CompletionResponse)
async def complete(payload: CompletionRequest, engine: AIEngine = Depends(get_ai_engine)):
    """Forward one request to the active provider. Failures are returned in the envelope."""
    options = None
    if payload.options is not None:
        options = RequestOptions(
            temperature=payload.options.temperature,
            max_tokens=payload.options.max_tokens,
        )
    request = AIRequest(type=payload.type, prompt=payload.prompt, context=payload.context, options=options)
    return _completion_response(await engine.complete(request))


@router.post("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(engine: AIEngine = Depends(get_ai_engine)):
    success = await engine.test_connection()
    return ConnectionTestResponse(success=success, provider=engine.status().provider)


@router.post("/self-test", response_model=SelfTestResponse)
async def self_test(engine: AIEngine = Depends(get_ai_engine)):
    result = await features.run_self_test(engine)
    return SelfTestResponse(
        success=result.success,
        provider=result.provider,
        duration_ms=result.duration_ms,
        data=result.data,
        error=result.error,
    )


@router.get("/logs", response_model=List[AILogEntryResponse])
def list_logs(engine: AIEngine = Depends(get_ai_engine)):
    """Most recent AI log entries, oldest first."""
    return [AILogEntryResponse(**entry.to_dict()) for entry in engine.logs()]


@router.delete("/logs", status_code=status.HTTP_204_NO_CONTENT)
def clear_logs(engine: AIEngine = Depends(get_ai_engine)):
    engine.clear_logs()
    return None


@router.post("/templates", response_model=FeatureResponse)
async def generate_template(payload: TemplateGenerationRequest, engine: AIEngine = Depends(get_ai_engine)):
    result = await features.generate_template(engine, payload.description)
    return _feature_response(result)


@router.post("/load-predictions", response_model=FeatureResponse)
async def predict_load(payload: LoadPredictionRequest, engine: AIEngine = Depends(get_ai_engine)):
    context = features.PredictionContext(
        exercise_id=payload.exercise_id,
        exercise_name=payload.exercise_name,
        athlete_id=payload.athlete_id,
        previous_weight=payload.previous_weight,
        previous_reps=payload.previous_reps,
        target_reps=payload.target_reps,
        previous_sets=payload.previous_sets,
        recent_history=[entry.model_dump() for entry in payload.recent_history],
    )
    return _feature_response(await features.predict_load(engine, context))


@router.post("/exercise-suggestions", response_model=FeatureResponse)
async def suggest_exercises(payload: ExerciseSuggestionRequest, engine: AIEngine = Depends(get_ai_engine)):
    context = features.SuggestionContext(
        current_exercise_names=payload.current_exercise_names,
        session_type=payload.session_type,
        session_goal=payload.session_goal,
    )
    return _feature_response(await features.suggest_exercises(engine, context))


@router.post("/analysis", response_model=FeatureResponse)
async def analyze(payload: AnalysisRequest, engine: AIEngine = Depends(get_ai_engine)):
    return _feature_response(await features.analyze(engine, payload.session_data, payload.context))

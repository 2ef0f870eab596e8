"""Request/response envelope shared by every AI provider."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")


class RequestType(str, enum.Enum):
    """Kinds of AI interaction callers can ask for."""
    GENERATION = "generation"
    PREDICTION = "prediction"
    SUGGESTION = "suggestion"
    ANALYSIS = "analysis"


class ProviderKind(str, enum.Enum):
    MOCK = "mock"
    REMOTE = "remote"
    NONE = "none"


@dataclass(frozen=True)
class RequestOptions:
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class AIRequest:
    type: RequestType
    prompt: str
    context: Optional[Mapping[str, Any]] = None
    options: Optional[RequestOptions] = None


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class AIResponse(Generic[T]):
    """Outcome of one logical request. ``data`` is meaningful only on success, ``error`` only on failure."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    usage: Optional[TokenUsage] = None
    cached: bool = False

    @classmethod
    def ok(cls, data: T, usage: Optional[TokenUsage] = None) -> "AIResponse[T]":
        return cls(success=True, data=data, usage=usage, cached=False)

    @classmethod
    def fail(cls, error: str, kind: Optional[str] = None) -> "AIResponse[T]":
        return cls(success=False, error=error, error_kind=kind)


@dataclass(frozen=True)
class ProviderConfig:
    """Remote endpoint settings. Replaced wholesale, never mutated in place."""

    api_url: str
    api_key: str
    model: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AILogEntry:
    request_type: str
    success: bool
    type: str = "response"  # request, response, error, fallback
    provider: str = "system"
    details: Optional[str] = None
    duration_ms: Optional[int] = None
    token_usage: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type,
            "provider": self.provider,
            "request_type": self.request_type,
            "success": self.success,
            "details": self.details,
            "duration_ms": self.duration_ms,
            "token_usage": self.token_usage,
        }


@dataclass
class FeatureFlags:
    """Per-feature switches, checked on top of the engine's global flag."""

    template_generation: bool = True
    load_prediction: bool = True
    exercise_suggestions: bool = True
    auto_suggestions: bool = True
    show_inline_hints: bool = True
    aggressiveness: str = "balanced"


@dataclass(frozen=True)
class EngineStatus:
    enabled: bool
    provider: str
    remote_available: bool

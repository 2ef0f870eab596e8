"""AI request orchestration: providers, retry policy, engine and features."""

from .engine import AIEngine, get_engine
from .errors import ErrorKind, ProviderError, is_non_retryable
from .log_buffer import AILogBuffer
from .providers import MockProvider, RemoteProvider
from .retry import ATTEMPT_TIMEOUT_SECONDS, RETRY_CONFIG, WORST_CASE_LATENCY_SECONDS, RetryConfig
from .types import (
    AILogEntry,
    AIRequest,
    AIResponse,
    ProviderConfig,
    ProviderKind,
    RequestOptions,
    RequestType,
    TokenUsage,
)

__all__ = [
    "AIEngine",
    "get_engine",
    "ErrorKind",
    "ProviderError",
    "is_non_retryable",
    "AILogBuffer",
    "MockProvider",
    "RemoteProvider",
    "ATTEMPT_TIMEOUT_SECONDS",
    "RETRY_CONFIG",
    "WORST_CASE_LATENCY_SECONDS",
    "RetryConfig",
    "AILogEntry",
    "AIRequest",
    "AIResponse",
    "ProviderConfig",
    "ProviderKind",
    "RequestOptions",
    "RequestType",
    "TokenUsage",
]

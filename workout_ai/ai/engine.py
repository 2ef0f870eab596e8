"""Dispatches AI requests to the active provider and records every outcome."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from workout_ai.ai.errors import ErrorKind, is_quota_error
from workout_ai.ai.log_buffer import AILogBuffer, LogListener, LogSink
from workout_ai.ai.providers import AIProvider, MockProvider, RemoteProvider
from workout_ai.ai.types import (
    AILogEntry,
    AIRequest,
    AIResponse,
    EngineStatus,
    FeatureFlags,
    ProviderConfig,
    ProviderKind,
    RequestType,
)
from workout_ai.core.config import Settings, get_settings
from workout_ai.core.messages import AI_DISABLED, AI_QUOTA_FALLBACK, AI_UNKNOWN_ERROR
from workout_ai.core.redis import RedisLogSink, create_redis_client


logger = logging.getLogger("workout_ai.ai.engine")


def _request_type_value(request: AIRequest) -> str:
    return getattr(request.type, "value", str(request.type))


class AIEngine:
    """Owns provider selection, the global kill switch and the AI log.

    Each ``complete`` call resolves its provider once on entry, so switching
    providers never affects a request that is already in flight.
    """

    def __init__(
        self,
        *,
        mock: Optional[MockProvider] = None,
        remote: Optional[RemoteProvider] = None,
        provider: ProviderKind | str = ProviderKind.MOCK,
        enabled: bool = True,
        log_buffer: Optional[AILogBuffer] = None,
        features: Optional[FeatureFlags] = None,
        fallback_to_mock_on_quota: bool = False,
        remote_defaults: Optional[ProviderConfig] = None,
    ) -> None:
        self.mock = mock or MockProvider()
        self.remote = remote or RemoteProvider()
        self._providers: Dict[ProviderKind, AIProvider] = {
            ProviderKind.MOCK: self.mock,
            ProviderKind.REMOTE: self.remote,
        }
        self._provider_kind = ProviderKind(provider)
        self._enabled = enabled
        self.log_buffer = log_buffer or AILogBuffer()
        self.features = features or FeatureFlags()
        self.fallback_to_mock_on_quota = fallback_to_mock_on_quota
        # Seed for remote fields a partial update leaves unset before any key is configured
        self.remote_defaults = remote_defaults

    @classmethod
    def from_settings(cls, settings: Settings, sink: Optional[LogSink] = None) -> "AIEngine":
        return cls(
            mock=MockProvider(latency_ms=settings.AI_MOCK_LATENCY_MS),
            remote=RemoteProvider(settings.remote_config()),
            provider=settings.AI_PROVIDER or ProviderKind.MOCK,
            enabled=settings.AI_ENABLED,
            log_buffer=AILogBuffer(capacity=settings.AI_LOG_CAPACITY, sink=sink),
            features=FeatureFlags(
                template_generation=settings.AI_TEMPLATE_GENERATION,
                load_prediction=settings.AI_LOAD_PREDICTION,
                exercise_suggestions=settings.AI_EXERCISE_SUGGESTIONS,
                auto_suggestions=settings.AI_AUTO_SUGGESTIONS,
                show_inline_hints=settings.AI_SHOW_INLINE_HINTS,
                aggressiveness=settings.AI_AGGRESSIVENESS,
            ),
            fallback_to_mock_on_quota=settings.AI_FALLBACK_TO_MOCK_ON_QUOTA,
            remote_defaults=ProviderConfig(
                api_url=settings.AI_API_URL,
                api_key="",
                model=settings.AI_MODEL,
                headers=dict(settings.AI_EXTRA_HEADERS),
            ),
        )

    async def initialize(self) -> None:
        await self.mock.initialize()
        await self.remote.initialize()
        logger.info(
            "AIEngine initialized",
            extra={"provider": self._provider_kind.value, "enabled": self._enabled},
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def provider_kind(self) -> ProviderKind:
        return self._provider_kind

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        self._record(
            AILogEntry(
                type="request",
                request_type=RequestType.ANALYSIS.value,
                success=True,
                details=f"AI {'enabled' if enabled else 'disabled'}",
            )
        )

    def set_provider(self, provider: ProviderKind | str) -> None:
        self._provider_kind = ProviderKind(provider)
        self._record(
            AILogEntry(
                type="request",
                request_type=RequestType.ANALYSIS.value,
                success=True,
                details=f"Provider changed to: {self._provider_kind.value}",
            )
        )

    def configure_remote(self, config: Optional[ProviderConfig]) -> None:
        self.remote.set_config(config)

    def apply_settings(
        self,
        *,
        enabled: Optional[bool] = None,
        provider: Optional[str] = None,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **feature_updates: Any,
    ) -> None:
        """Sync engine state with a partial settings update."""
        if enabled is not None:
            self.set_enabled(enabled)
        if provider is not None:
            self.set_provider(provider)

        if any(value is not None for value in (api_url, api_key, model, headers)):
            base = self.remote.config or self.remote_defaults or ProviderConfig(api_url="", api_key="")
            config = ProviderConfig(
                api_url=api_url if api_url is not None else base.api_url,
                api_key=api_key if api_key is not None else base.api_key,
                model=model if model is not None else base.model,
                headers=dict(headers) if headers is not None else dict(base.headers),
            )
            self.configure_remote(config)

        updates = {key: value for key, value in feature_updates.items() if value is not None}
        if updates:
            self.features = replace(self.features, **updates)

    def status(self) -> EngineStatus:
        return EngineStatus(
            enabled=self._enabled,
            provider=self._provider_kind.value,
            remote_available=self.remote.is_available,
        )

    def _active_provider(self) -> AIProvider:
        return self._providers[self._provider_kind]

    async def complete(self, request: AIRequest) -> AIResponse[Any]:
        if not self._enabled or self._provider_kind == ProviderKind.NONE:
            response: AIResponse[Any] = AIResponse.fail(AI_DISABLED, ErrorKind.DISABLED.value)
            await self._record_async(
                AILogEntry(
                    type="error",
                    request_type=_request_type_value(request),
                    success=False,
                    details=response.error,
                )
            )
            return response

        provider = self._active_provider()

        start_time = time.time()
        try:
            response = await provider.complete(request)
        except Exception as exc:
            logger.exception("Provider %s raised while completing a request", provider.name)
            response = AIResponse.fail(str(exc) or AI_UNKNOWN_ERROR, ErrorKind.UNKNOWN.value)
        duration_ms = int((time.time() - start_time) * 1000)

        if (
            not response.success
            and self.fallback_to_mock_on_quota
            and provider is not self.mock
            and is_quota_error(response.error)
        ):
            await self._record_async(
                AILogEntry(
                    type="fallback",
                    provider=provider.name,
                    request_type=_request_type_value(request),
                    success=True,
                    details=AI_QUOTA_FALLBACK,
                    duration_ms=duration_ms,
                )
            )
            return await self.mock.complete(request)

        await self._record_async(
            AILogEntry(
                type="response" if response.success else "error",
                provider=provider.name,
                request_type=_request_type_value(request),
                success=response.success,
                details=f"Completed in {duration_ms}ms" if response.success else response.error,
                duration_ms=duration_ms,
                token_usage=response.usage.total_tokens if response.usage else None,
            )
        )
        return response

    async def test_connection(self) -> bool:
        if self._provider_kind == ProviderKind.NONE:
            return False
        provider = self._active_provider()
        try:
            return await provider.test_connection()
        except Exception:
            logger.warning("Connection test failed for provider %s", provider.name, exc_info=True)
            return False

    def logs(self) -> list[AILogEntry]:
        return self.log_buffer.entries()

    def clear_logs(self) -> None:
        self.log_buffer.clear()

    def on_log(self, listener: LogListener) -> Callable[[], None]:
        return self.log_buffer.subscribe(listener)

    def _record(self, entry: AILogEntry) -> None:
        try:
            self.log_buffer.append(entry)
        except Exception:
            logger.warning("Failed to record AI log entry", exc_info=True)

    async def _record_async(self, entry: AILogEntry) -> None:
        # The sink does blocking I/O, so it runs off the event loop.
        try:
            self.log_buffer.append(entry, mirror=False)
        except Exception:
            logger.warning("Failed to record AI log entry", exc_info=True)
            return
        if self.log_buffer.sink is not None:
            await asyncio.to_thread(self.log_buffer.mirror, entry)


@lru_cache
def get_engine() -> AIEngine:
    settings = get_settings()
    sink = None
    client = create_redis_client(settings.REDIS_URL)
    if client is not None:
        sink = RedisLogSink(client, settings.REDIS_LOG_KEY, settings.AI_LOG_CAPACITY)
    return AIEngine.from_settings(settings, sink=sink)

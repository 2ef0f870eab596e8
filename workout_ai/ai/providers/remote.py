"""Provider for remote chat-completion style HTTP APIs (OpenAI-compatible or native Gemini)."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from workout_ai.ai.errors import ErrorKind, ProviderError
from workout_ai.ai.prompts import CONNECTION_TEST_PROMPT, build_prompts
from workout_ai.ai.retry import ATTEMPT_TIMEOUT_SECONDS, RETRY_CONFIG, RetryConfig, complete_with_retry
from workout_ai.ai.types import AIRequest, AIResponse, ProviderConfig, RequestType, TokenUsage
from workout_ai.core.messages import AI_EMPTY_RESPONSE, AI_REMOTE_NOT_CONFIGURED


logger = logging.getLogger("workout_ai.ai.remote")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

MODE_OPENAI_COMPATIBLE = "openai-compatible"
MODE_NATIVE_GEMINI = "native-gemini"
MODE_UNKNOWN = "unknown"


def detect_provider_mode(url: str) -> str:
    if not url:
        return MODE_UNKNOWN
    if "/openai/" in url:
        return MODE_OPENAI_COMPATIBLE
    if "generativelanguage.googleapis.com" in url or "gemini" in url:
        return MODE_NATIVE_GEMINI
    return MODE_UNKNOWN


class RemoteProvider:
    name = "remote"

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_config: RetryConfig = RETRY_CONFIG,
        attempt_timeout: float = ATTEMPT_TIMEOUT_SECONDS,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self.retry_config = retry_config
        self.attempt_timeout = attempt_timeout
        self._sleep = sleep

    @property
    def config(self) -> Optional[ProviderConfig]:
        return self._config

    @property
    def is_available(self) -> bool:
        return self._config is not None and bool(self._config.api_key)

    async def initialize(self, config: Optional[ProviderConfig] = None) -> None:
        if config is not None:
            self._config = config
        logger.info(
            "RemoteProvider initialized %s",
            "with config" if self.is_available else "without config",
        )

    def set_config(self, config: Optional[ProviderConfig]) -> None:
        self._config = config

    def _build_payload(self, config: ProviderConfig, request: AIRequest) -> Tuple[Dict[str, str], str]:
        system_prompt, user_prompt = build_prompts(request.type, request.prompt, request.context)
        options = request.options
        temperature = DEFAULT_TEMPERATURE
        max_tokens = DEFAULT_MAX_TOKENS
        if options is not None:
            if options.temperature is not None:
                temperature = options.temperature
            if options.max_tokens is not None:
                max_tokens = options.max_tokens

        headers: Dict[str, str] = {"Content-Type": "application/json", **config.headers}

        if detect_provider_mode(config.api_url) == MODE_NATIVE_GEMINI:
            headers["x-goog-api-key"] = config.api_key
            body: Dict[str, Any] = {
                "contents": [{"parts": [{"text": f"{system_prompt}\n\n{user_prompt}"}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_tokens,
                    "responseMimeType": "application/json",
                },
            }
        else:
            headers["Authorization"] = f"Bearer {config.api_key}"
            body = {
                "model": config.model or DEFAULT_MODEL,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": temperature,
                "max_tokens": max_tokens,
                "response_format": {"type": "json_object"},
            }
        return headers, json.dumps(body, ensure_ascii=False)

    @staticmethod
    def _usage(result: Dict[str, Any], block: str, prompt_key: str, completion_key: str) -> TokenUsage:
        # Gateways may omit the block or send null counters; usage never decides success.
        usage = result.get(block)
        if not isinstance(usage, dict):
            usage = {}
        try:
            return TokenUsage(
                prompt_tokens=int(usage.get(prompt_key) or 0),
                completion_tokens=int(usage.get(completion_key) or 0),
            )
        except (TypeError, ValueError):
            return TokenUsage(prompt_tokens=0, completion_tokens=0)

    @classmethod
    def _extract_content(cls, mode: str, result: Dict[str, Any]) -> Tuple[Optional[str], TokenUsage]:
        if mode == MODE_NATIVE_GEMINI:
            try:
                content = result["candidates"][0]["content"]["parts"][0]["text"]
            except (KeyError, IndexError, TypeError):
                content = None
            return content, cls._usage(result, "usageMetadata", "promptTokenCount", "candidatesTokenCount")

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content, cls._usage(result, "usage", "prompt_tokens", "completion_tokens")

    async def _attempt(self, config: ProviderConfig, headers: Dict[str, str], body: str) -> AIResponse[Any]:
        # The retry controller owns the deadline, so httpx gets no timeout of its own.
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(config.api_url, headers=headers, content=body)
        except httpx.TimeoutException as exc:
            raise ProviderError(f"Request timed out: {exc}", ErrorKind.TIMEOUT) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Network error: {exc.__class__.__name__}: {exc}", ErrorKind.TRANSPORT) from exc

        if not response.is_success:
            raise ProviderError(
                f"API Error {response.status_code}: {response.text}",
                ErrorKind.HTTP_ERROR,
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise ProviderError(f"Invalid JSON from API: {exc}", ErrorKind.PARSE_ERROR) from exc
        if not isinstance(result, dict):
            raise ProviderError(AI_EMPTY_RESPONSE, ErrorKind.EMPTY_RESPONSE)

        content, usage = self._extract_content(detect_provider_mode(config.api_url), result)
        if not content:
            raise ProviderError(AI_EMPTY_RESPONSE, ErrorKind.EMPTY_RESPONSE)

        try:
            data = json.loads(content)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ProviderError(f"Invalid JSON in response content: {exc}", ErrorKind.PARSE_ERROR) from exc

        return AIResponse.ok(data, usage=usage)

    async def complete(self, request: AIRequest) -> AIResponse[Any]:
        # Captured once: a reconfiguration mid-flight applies to the next call only.
        config = self._config
        if config is None or not config.api_key:
            return AIResponse.fail(AI_REMOTE_NOT_CONFIGURED, ErrorKind.UNCONFIGURED.value)

        try:
            headers, body = self._build_payload(config, request)
        except (TypeError, ValueError) as exc:
            logger.warning("ai_invalid_context", extra={"request_type": getattr(request.type, "value", request.type), "error": str(exc)})
            return AIResponse.fail(f"Invalid request context: {exc}", ErrorKind.NON_RETRYABLE.value)

        start_time = time.time()
        logger.info(
            "ai_request",
            extra={
                "provider": self.name,
                "model": config.model or DEFAULT_MODEL,
                "request_type": getattr(request.type, "value", request.type),
            },
        )

        response = await complete_with_retry(
            lambda: self._attempt(config, headers, body),
            config=self.retry_config,
            attempt_timeout=self.attempt_timeout,
            sleep=self._sleep,
        )

        duration_ms = int((time.time() - start_time) * 1000)
        if response.success:
            logger.info(
                "ai_response",
                extra={
                    "provider": self.name,
                    "duration_ms": duration_ms,
                    "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                    "completion_tokens": response.usage.completion_tokens if response.usage else 0,
                },
            )
        else:
            logger.error(
                "ai_error",
                extra={
                    "provider": self.name,
                    "duration_ms": duration_ms,
                    "error": response.error,
                    "error_kind": response.error_kind,
                },
            )
        return response

    async def test_connection(self) -> bool:
        if not self.is_available:
            return False
        try:
            response = await self.complete(AIRequest(type=RequestType.ANALYSIS, prompt=CONNECTION_TEST_PROMPT))
        except Exception:
            logger.warning("Remote connection test raised", exc_info=True)
            return False
        return response.success

"""Bounded retry with per-attempt deadline for a single logical AI call.

Each attempt is wrapped in a hard deadline (``ATTEMPT_TIMEOUT_SECONDS``); the
deadline cancels only the in-flight attempt, not the loop. Failures are
classified with :func:`is_non_retryable`: terminal errors are returned
unchanged after one attempt, everything else is retried with capped
exponential backoff until ``max_attempts`` is reached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from workout_ai.ai.errors import ErrorKind, ProviderError, is_non_retryable
from workout_ai.ai.types import AIResponse
from workout_ai.core.messages import AI_REQUEST_TIMED_OUT


logger = logging.getLogger("workout_ai.ai.retry")


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 8000

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait after failed ``attempt`` (1-based)."""
        return min(self.base_delay_ms * 2 ** (attempt - 1), self.max_delay_ms)


RETRY_CONFIG = RetryConfig()
ATTEMPT_TIMEOUT_SECONDS = 30.0


def worst_case_latency_seconds(
    config: RetryConfig = RETRY_CONFIG,
    attempt_timeout: float = ATTEMPT_TIMEOUT_SECONDS,
) -> float:
    backoff_ms = sum(config.delay_ms(attempt) for attempt in range(1, config.max_attempts))
    return attempt_timeout * config.max_attempts + backoff_ms / 1000.0


# Three timed-out attempts plus the 1s and 2s backoff sleeps.
WORST_CASE_LATENCY_SECONDS = worst_case_latency_seconds()


class wait_backoff(wait_base):
    def __init__(self, config: RetryConfig) -> None:
        self.config = config

    def __call__(self, retry_state: RetryCallState) -> float:
        return self.config.delay_ms(retry_state.attempt_number) / 1000.0


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and not is_non_retryable(exc)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "ai_retry",
        extra={
            "attempt": retry_state.attempt_number,
            "delay_ms": int(delay * 1000),
            "error": str(exc) if exc else None,
            "error_kind": getattr(exc, "kind", None),
        },
    )


async def complete_with_retry(
    attempt: Callable[[], Awaitable[AIResponse[Any]]],
    *,
    config: RetryConfig = RETRY_CONFIG,
    attempt_timeout: float = ATTEMPT_TIMEOUT_SECONDS,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> AIResponse[Any]:
    """Run ``attempt`` until it succeeds, fails terminally or attempts run out.

    ``attempt`` returns a successful :class:`AIResponse` or raises
    :class:`ProviderError`. The result is always an ``AIResponse``.
    """

    async def run_attempt() -> AIResponse[Any]:
        try:
            return await asyncio.wait_for(attempt(), timeout=attempt_timeout)
        except asyncio.TimeoutError:
            raise ProviderError(AI_REQUEST_TIMED_OUT, ErrorKind.TIMEOUT) from None
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(str(exc) or exc.__class__.__name__, ErrorKind.UNKNOWN) from exc

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_backoff(config),
        retry=retry_if_exception(_is_retryable),
        before_sleep=_log_retry,
        sleep=sleep or asyncio.sleep,
        reraise=True,
    )

    try:
        return await retrying(run_attempt)
    except ProviderError as exc:
        if is_non_retryable(exc):
            return AIResponse.fail(exc.message, ErrorKind.NON_RETRYABLE.value)
        return AIResponse.fail(
            f"Failed after {config.max_attempts} attempts: {exc.message}",
            ErrorKind.EXHAUSTED_RETRIES.value,
        )

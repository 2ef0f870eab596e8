from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from workout_ai.ai.engine import AIEngine
from workout_ai.ai.providers import MockProvider, RemoteProvider
from workout_ai.ai.types import ProviderConfig


API_URL = "https://api.example.test/v1/chat/completions"


class SleepRecorder:
    """Stands in for asyncio.sleep so backoff delays are recorded, not waited."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def remote_config() -> ProviderConfig:
    return ProviderConfig(
        api_url=API_URL,
        api_key="sk-test",
        model="gpt-4o-mini",
        headers={"X-Client": "workout-planner"},
    )


@pytest.fixture
def chat_completion() -> Callable[..., httpx.Response]:
    def build(payload: Any, prompt_tokens: int = 12, completion_tokens: int = 34) -> httpx.Response:
        content = payload if isinstance(payload, str) else json.dumps(payload)
        return httpx.Response(
            200,
            json={
                "choices": [{"message": {"role": "assistant", "content": content}}],
                "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
            },
        )

    return build


@pytest.fixture
def make_remote(remote_config, sleeps) -> Callable[..., RemoteProvider]:
    def build(handler, config: ProviderConfig | None = remote_config, **kwargs) -> RemoteProvider:
        kwargs.setdefault("sleep", sleeps)
        return RemoteProvider(config, transport=httpx.MockTransport(handler), **kwargs)

    return build


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider(latency_ms=0)


@pytest.fixture
def engine(mock_provider) -> AIEngine:
    return AIEngine(mock=mock_provider, remote=RemoteProvider(), provider="mock")

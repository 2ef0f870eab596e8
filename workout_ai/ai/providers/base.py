from __future__ import annotations

from typing import Any, Protocol

from workout_ai.ai.types import AIRequest, AIResponse


class AIProvider(Protocol):
    name: str

    @property
    def is_available(self) -> bool:  # pragma: no cover - interface
        ...

    async def initialize(self, config: Any = None) -> None:  # pragma: no cover - interface
        ...

    async def complete(self, request: AIRequest) -> AIResponse[Any]:  # pragma: no cover - interface
        ...

    async def test_connection(self) -> bool:  # pragma: no cover - interface
        ...

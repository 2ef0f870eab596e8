from __future__ import annotations

from workout_ai.ai.engine import AIEngine, get_engine


def get_ai_engine() -> AIEngine:
    """Process-wide engine; tests override this dependency with an isolated one."""
    return get_engine()

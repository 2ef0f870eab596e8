from functools import lru_cache
from typing import TYPE_CHECKING, Dict, Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from workout_ai.ai.types import ProviderConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    API_V1_PREFIX: str = "/api/v1"

    # AI engine
    AI_ENABLED: bool = True
    AI_PROVIDER: Optional[Literal["mock", "remote", "none"]] = None
    AI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    AI_API_KEY: str | None = None
    AI_MODEL: str = "gpt-4o-mini"
    AI_EXTRA_HEADERS: Dict[str, str] = {}
    AI_MOCK_LATENCY_MS: int = 800
    AI_LOG_CAPACITY: int = 100
    AI_FALLBACK_TO_MOCK_ON_QUOTA: bool = False

    # Feature flags gating which callers may reach the engine
    AI_TEMPLATE_GENERATION: bool = True
    AI_LOAD_PREDICTION: bool = True
    AI_EXERCISE_SUGGESTIONS: bool = True
    AI_AUTO_SUGGESTIONS: bool = True
    AI_SHOW_INLINE_HINTS: bool = True
    AI_AGGRESSIVENESS: Literal["minimal", "balanced", "proactive"] = "balanced"

    # Redis mirror for the AI log (optional)
    REDIS_URL: str | None = None
    REDIS_LOG_KEY: str = "workout_ai:logs"

    @model_validator(mode="after")
    def _default_provider(self) -> "Settings":
        # Remote only makes sense out of the box when a key is present
        if self.AI_PROVIDER is None:
            self.AI_PROVIDER = "remote" if self.AI_API_KEY else "mock"
        return self

    def remote_config(self) -> "ProviderConfig | None":
        from workout_ai.ai.types import ProviderConfig

        if not self.AI_API_KEY:
            return None
        return ProviderConfig(
            api_url=self.AI_API_URL,
            api_key=self.AI_API_KEY,
            model=self.AI_MODEL,
            headers=dict(self.AI_EXTRA_HEADERS),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

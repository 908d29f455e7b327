"""Application configuration using pydantic-settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase (company_profiles table)
    supabase_url: str
    supabase_service_key: str

    # LLM provider used for profile extraction: "openai" or "anthropic"
    llm_provider: str = "openai"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 2000

    # OpenAI (default provider, JSON mode)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4.1-mini"

    # Anthropic (alternative provider)
    anthropic_api_key: Optional[str] = None
    claude_model: str = "claude-sonnet-4-20250514"

    # Website fetching
    fetch_timeout_seconds: int = 30
    fetch_user_agent: str = (
        "Mozilla/5.0 (compatible; CompanyProfiler/1.0; "
        "+https://github.com/devchallenge-mccarren)"
    )

    # API
    profile_history_limit: int = 50
    cors_origins: str = "*"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings for testing."""
    global _settings
    _settings = None

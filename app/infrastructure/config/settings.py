"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    repository_backend: str = "in_memory"  # in_memory or postgres
    database_url: str = ""  # Required when repository_backend=postgres
    redis_url: str = "redis://localhost:6379/0"

    # Rate limiting (per user, fixed hourly window)
    rate_limiter: str = "in_memory"  # in_memory, redis or none
    rate_limit_general_per_hour: int = 500
    rate_limit_ai_per_hour: int = 100

    # Invites
    invite_ttl_hours: int = 24
    invite_code_length: int = 8
    invite_code_attempts: int = 5
    default_max_participants: int = 8
    public_base_url: str = "https://zenithwell.online"

    # Readiness gate
    min_ready_participants: int = 2
    require_all_ready: bool = True

    # Presence
    online_threshold_seconds: int = 30
    away_threshold_seconds: int = 60
    heartbeat_interval_seconds: int = 15
    presence_retention_hours: int = 24

    # Free tier budget (applies to session owners only)
    free_tier_session_minutes: int = 15
    free_tier_max_sessions: int = 3

    internal_service_token: str = ""

    llm_enabled: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()

"""
Configuration Management

Uses Pydantic BaseSettings to load configuration from environment variables.
All settings can be overridden via .env file or environment variables.

Environment Variables:
    ANTHROPIC_API_KEY: API key for the Claude chat capability
    CLAUDE_CHAT_MODEL: Model used for crisis chat completions
    PORT: Port to bind the application server (default: 3000)
    CORS_ORIGINS: Comma-separated list of allowed origins (default: *)
    DATA_DIR: Directory holding the resource/tip/language tables
    APP_ENV: Environment name (development/staging/production)
    DEBUG: Enable debug mode (default: False)
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Environment
    app_env: Literal["development", "staging", "production"] = "development"
    """Current application environment.

    Options:
    - development: Local development, verbose errors, docs enabled
    - staging: Pre-production testing environment
    - production: Live production environment, no internal error detail
    """

    debug: bool = False
    """Enable debug mode.

    When True:
    - DEBUG log level
    - Request durations are logged
    - Auto-reload when started through ``python -m app.main``
    """

    # Application Configuration
    app_name: str = "bowery-connect"
    """Application name."""

    service_name: str = "BoweryConnect Crisis API"
    """Service name reported by the health check."""

    host: str = "0.0.0.0"
    """Host to bind the application server."""

    port: int = 3000
    """Port to bind the application server."""

    # CORS Configuration
    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins."""

    # Claude Configuration
    anthropic_api_key: Optional[str] = None
    """Anthropic API key.

    The service starts without it; chat requests then answer with the
    fallback crisis message until a key is configured.
    """

    claude_chat_model: str = "claude-sonnet-4-20250514"
    """Model used for crisis chat completions."""

    claude_fallback_model: Optional[str] = "claude-3-5-haiku-20241022"
    """Model tried once when the primary model fails. Empty disables it."""

    chat_temperature: float = 0.7
    """Sampling temperature for crisis chat completions."""

    chat_max_tokens: int = 300
    """Maximum output tokens per completion.

    Replies are read on phones with little battery, so keep them short.
    """

    llm_timeout_seconds: float = 30.0
    """Per-request timeout passed to the Anthropic SDK."""

    llm_max_retries: int = 3
    """Attempts per model for rate-limit and connection errors."""

    # Static Data
    data_dir: Path = DEFAULT_DATA_DIR
    """Directory containing resources.json, survival_tips.json and languages.json."""

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env file if it exists
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow ANTHROPIC_API_KEY or anthropic_api_key
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def cors_origins_list(self) -> list[str]:
        """Split cors_origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and reused
    across the application.

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from app.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.port)
        3000
    """
    return Settings()


# Module-level settings instance for easy imports
settings = get_settings()

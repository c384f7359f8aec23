"""
Configuration management for the talent search engine.

This module provides centralized configuration management supporting:
- Environment variables and .env files
- OpenAI-compatible embedding and text generation providers
- Search, ranking and caching tunables
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """
    Main application settings with smart defaults for local development.
    """

    # Environment Detection
    ENVIRONMENT: str = Field(
        default="local",
        description="Environment (local/development/staging/production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Debug mode"
    )

    # Core Application Settings
    APP_NAME: str = Field(
        default="Talent Search Engine",
        description="Application name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Server Configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server host"
    )
    PORT: int = Field(
        default=8000,
        description="Server port"
    )

    # CORS Configuration
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated CORS origins"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FORMAT: str = Field(
        default="console",
        description="Log format (json/console)"
    )

    # OpenAI Configuration (embeddings and player analysis)
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        description="OpenAI API key"
    )
    OPENAI_BASE_URL: Optional[str] = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible API base URL"
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for player analysis"
    )
    OPENAI_EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name"
    )
    OPENAI_MAX_TOKENS: int = Field(
        default=800,
        description="Maximum tokens for analysis completions"
    )
    OPENAI_TEMPERATURE: float = Field(
        default=0.4,
        description="Temperature for analysis completions"
    )

    # PostgreSQL Configuration
    POSTGRES_URL: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection URL"
    )
    POSTGRES_HOST: str = Field(
        default="localhost",
        description="PostgreSQL host"
    )
    POSTGRES_PORT: int = Field(
        default=5432,
        description="PostgreSQL port"
    )
    POSTGRES_USER: str = Field(
        default="talent_user",
        description="PostgreSQL user"
    )
    POSTGRES_PASSWORD: str = Field(
        default="talent_password",
        description="PostgreSQL password"
    )
    POSTGRES_DB: str = Field(
        default="talent-search",
        description="PostgreSQL database name"
    )

    # Embedding Configuration
    EMBEDDING_DIMENSION: int = Field(
        default=1536,
        description="Embedding vector dimension (text-embedding-3-small)"
    )
    EMBEDDING_BATCH_SIZE: int = Field(
        default=100,
        description="Maximum inputs per embedding request"
    )
    EMBEDDING_MAX_INPUT_CHARS: int = Field(
        default=8000,
        description="Maximum characters accepted for a single embedding input"
    )
    EMBEDDING_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Deadline for a single embedding request"
    )
    EMBEDDING_MAX_RETRIES: int = Field(
        default=3,
        description="Attempts for retryable embedding failures"
    )

    # Vector Retrieval
    VECTOR_SEARCH_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="Deadline for a nearest-neighbour query"
    )
    VECTOR_OVER_FETCH_FACTOR: int = Field(
        default=3,
        description="Multiplier applied to the result limit when fetching candidates"
    )

    # Search Defaults
    SEARCH_DEFAULT_LIMIT: int = Field(
        default=50,
        description="Default number of results"
    )
    SEARCH_MAX_LIMIT: int = Field(
        default=100,
        description="Upper bound for the result limit"
    )
    SEARCH_DEFAULT_MIN_SIMILARITY: float = Field(
        default=0.3,
        description="Default minimum similarity score"
    )
    SEARCH_MAX_QUERY_LENGTH: int = Field(
        default=500,
        description="Maximum length of a free-text query"
    )

    # Relevance Ranking
    RANKING_SIMILARITY_WEIGHT: float = Field(
        default=1.0,
        description="Weight applied to semantic similarity"
    )
    RANKING_GAME_MATCH_BOOST: float = Field(
        default=0.15,
        description="Score boost for players matching a game of interest"
    )

    # Analysis Cache
    ANALYSIS_CACHE_TTL_SECONDS: int = Field(
        default=7 * 24 * 3600,
        description="Staleness window for cached player analyses"
    )
    ANALYSIS_MEMORY_CACHE_SIZE: int = Field(
        default=1000,
        description="Maximum analyses held in the in-process tier"
    )
    ANALYSIS_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        description="Deadline for a single analysis generation"
    )

    # Embedding Refresh Job
    EMBEDDING_REFRESH_BATCH_SIZE: int = Field(
        default=10,
        description="Players processed per refresh batch"
    )
    EMBEDDING_REFRESH_BATCH_DELAY_MS: int = Field(
        default=1000,
        description="Pause between refresh batches in milliseconds"
    )
    EMBEDDING_REFRESH_INTERVAL_SECONDS: int = Field(
        default=0,
        description="Interval for the periodic missing-embedding refresh (0 disables)"
    )

    # Entitlements
    PREMIUM_SEARCH_FEATURE_KEY: str = Field(
        default="premium_search",
        description="Feature key that unlocks semantic search"
    )
    ENTITLEMENT_GATING_ENABLED: bool = Field(
        default=True,
        description="Require the premium feature for semantic search"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate and normalize environment name."""
        v = v.lower()
        if v not in ('local', 'development', 'staging', 'production', 'test'):
            logger.warning(f"Unknown environment: {v}, defaulting to 'local'")
            return 'local'
        return v

    @field_validator('VECTOR_OVER_FETCH_FACTOR')
    @classmethod
    def validate_over_fetch(cls, v: int) -> int:
        """Over-fetching below 1 would starve the filter stage."""
        if v < 1:
            raise ValueError("VECTOR_OVER_FETCH_FACTOR must be at least 1")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'production'

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def get_postgres_url(self) -> str:
        """Get PostgreSQL connection URL."""
        if self.POSTGRES_URL:
            return self.POSTGRES_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    def is_openai_configured(self) -> bool:
        """Check if the OpenAI provider is configured."""
        return bool(self.OPENAI_API_KEY)

    def get_openai_config(self) -> Dict[str, Any]:
        """Get OpenAI client configuration."""
        if not self.OPENAI_API_KEY:
            raise ValueError("No OpenAI configuration found. Set OPENAI_API_KEY.")
        return {
            "api_key": self.OPENAI_API_KEY,
            "base_url": self.OPENAI_BASE_URL,
            "model": self.OPENAI_MODEL,
            "embedding_model": self.OPENAI_EMBEDDING_MODEL,
            "max_tokens": self.OPENAI_MAX_TOKENS,
            "temperature": self.OPENAI_TEMPERATURE,
        }

    def is_semantic_search_enabled(self) -> bool:
        """Check if semantic search is enabled."""
        return self.is_openai_configured()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and the .env file once per
    process and logs the resulting configuration state.
    """
    settings = Settings()

    logger.info(
        "Configuration ready",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        openai_configured=settings.is_openai_configured(),
        semantic_search_enabled=settings.is_semantic_search_enabled(),
        embedding_model=settings.OPENAI_EMBEDDING_MODEL,
        refresh_interval_seconds=settings.EMBEDDING_REFRESH_INTERVAL_SECONDS,
    )

    return settings

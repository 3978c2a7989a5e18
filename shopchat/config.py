import os
from pydantic_settings import BaseSettings
from pydantic import Field



class Settings(BaseSettings):
    """
    Application settings with validation.
    Uses Pydantic Settings for automatic env var loading and type validation.
    """

    # --- Model Configuration ---
    responder_model: str = Field(
        default="gpt-4o-mini",
        description="LLM used for open-domain answers",
    )
    responder_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for the general responder",
        ge=0,
        le=2,
    )

    # --- LLM Service Configuration ---
    llm_timeout: int = Field(
        default=30,
        description="Timeout in seconds for LLM calls",
        ge=5,
        le=120,
    )
    llm_max_retries: int = Field(
        default=3,
        description="Maximum retry attempts for failed LLM calls",
        ge=1,
        le=5,
    )
    llm_rate_limit: int = Field(
        default=3,
        description="Maximum concurrent LLM requests (rate limiting)",
        ge=1,
        le=10,
    )

    # --- Dialogue Configuration ---
    fallback_threshold: float = Field(
        default=0.4,
        description="Classifications below this confidence get a fallback reply",
        ge=0,
        le=1,
    )
    action_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for product/order/user lookups",
        gt=0,
    )
    product_search_limit: int = Field(
        default=5,
        description="Maximum products requested from the product search",
        ge=1,
        le=50,
    )

    # --- Session Store ---
    session_ttl_seconds: int = Field(
        default=3600,
        description="Idle sessions older than this are evicted",
        ge=60,
    )
    max_sessions: int = Field(
        default=10000,
        description="Upper bound of tracked sessions (least recently active evicted)",
        ge=1,
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level")
    structured_logging: bool = Field(
        default=True, description="Emit JSON log lines"
    )

    # --- Console App ---
    catalog_path: str | None = Field(
        default=None,
        description="Optional YAML file with products/orders for the local lookups",
    )

    # --- API Keys (Optional) ---
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    google_api_key: str | None = Field(
        default=None, description="Google API key for Gemini"
    )

    class Config:
        """Pydantic config."""

        env_file = os.getenv("DOTENV_PATH", ".env")
        case_sensitive = False
        extra = "ignore"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get or create settings instance.
    Singleton pattern for consistent configuration.

    Returns:
        Settings instance

    Raises:
        ValidationError: If env vars are present but invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_api_key(model_name: str) -> str | None:
    """
    Picks the provider key matching a model name.

    Args:
        model_name: Model identifier (e.g., "gpt-4o-mini", "gemini-2.5-flash")

    Returns:
        API key for the provider, or None if not configured
    """
    settings = get_settings()
    if "gemini" in model_name:
        return settings.google_api_key
    return settings.openai_api_key


settings = get_settings()

# Model parameters
RESPONDER_MODEL = settings.responder_model
RESPONDER_TEMPERATURE = settings.responder_temperature

# LLM Service parameters
LLM_TIMEOUT = settings.llm_timeout
LLM_MAX_RETRIES = settings.llm_max_retries
LLM_RATE_LIMIT = settings.llm_rate_limit

# Dialogue parameters
FALLBACK_THRESHOLD = settings.fallback_threshold
ACTION_TIMEOUT = settings.action_timeout
PRODUCT_SEARCH_LIMIT = settings.product_search_limit

# Session store parameters
SESSION_TTL_SECONDS = settings.session_ttl_seconds
MAX_SESSIONS = settings.max_sessions

# NOTE: API keys are NOT exposed globally.
# Use get_settings() or get_api_key() when needed.

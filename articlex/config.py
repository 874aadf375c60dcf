"""articlex configuration — loaded from .env via pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ArticlexSettings(BaseSettings):
    """All articlex configuration. Reads from .env file and ARTICLEX_* env vars."""

    # --- Fetching ---
    request_timeout: float = Field(
        default=10.0,
        description="Per-attempt HTTP timeout in seconds",
    )
    extraction_timeout: float = Field(
        default=10.0,
        description="Overall deadline for one page fetch, retries included",
    )
    max_retries: int = Field(default=2, description="Extra attempts after the first")
    retry_backoff: float = Field(
        default=0.25,
        description="Backoff unit in seconds; attempt n waits backoff * (n + 1)",
    )
    amp_max_retries: int = Field(default=1, description="Retries for the AMP mirror fetch")

    # --- Cache ---
    cache_ttl_seconds: float = Field(default=600.0, description="Extraction cache TTL")
    cache_max_entries: int | None = Field(
        default=None,
        description="Optional size bound; oldest insertion is evicted first",
    )

    # --- Prewarm ---
    prewarm_concurrency: int = Field(default=3, description="Max in-flight prewarm tasks")

    # --- Heuristics ---
    heuristics_path: str | None = Field(
        default=None,
        description="Path to a heuristics JSON file; bundled rules when unset",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="console",
        description="Log format: 'console' for dev, 'json' for production",
    )

    model_config = {
        "env_prefix": "ARTICLEX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton, import this everywhere
settings = ArticlexSettings()

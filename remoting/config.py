"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden from the environment (REMOTING_ prefix) or .env
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box: `remoting-server` serves the Todos API on :8085
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="REMOTING_", case_sensitive=False,
    )

    # Server
    app_title: str = "Todos Remoting API"
    host: str = "0.0.0.0"
    port: int = 8085

    # Remoting surface
    docs_path_template: str = "/api/{api_name}/docs"

    @field_validator("docs_path_template")
    @classmethod
    def require_leading_slash(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("docs_path_template must start with '/'")
        return v

    # Client proxy
    api_base_url: str = "http://localhost:8085"
    client_timeout_seconds: float = 30.0

    # Demo storage
    seed_todos: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:8080"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

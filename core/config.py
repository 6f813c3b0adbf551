"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


def _default_state_file() -> Path:
    """Return the default location of the client state file."""
    return Path.home() / ".dbadmin" / "state.json"


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Introspection
    SAMPLE_ROW_LIMIT: int = 100  # Rows returned per table by list/table-data

    # Client state (stand-in for browser local storage)
    STATE_FILE: Path = _default_state_file()

    model_config = {"env_prefix": "DBADMIN_", "env_file": ".env"}


settings = Settings()

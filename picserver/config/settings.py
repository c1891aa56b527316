from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8080

    staging_dir: Path | None = None
    request_timeout_seconds: float = 30.0

    heuristics: list[str] = ["creator_tool_is_photoshop", "create_modify_mismatch"]

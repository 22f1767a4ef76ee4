from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jimaku.errors import ConfigurationError

DEFAULT_MODEL = "gemini-2.5-pro"
API_KEY_ENV_VARS = ("JIMAKU_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables and `.env`."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(*API_KEY_ENV_VARS),
    )
    model: str = DEFAULT_MODEL
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".jimaku")
    exports_dir: Path | None = None
    max_workers: int = Field(default=2, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="JIMAKU_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _derive_paths(self) -> "Settings":
        if "exports_dir" not in self.model_fields_set or self.exports_dir is None:
            self.exports_dir = self.data_dir / "exports"
        return self

    def ensure_dirs(self) -> None:
        for path in (self.data_dir, self.exports_dir):
            path.mkdir(parents=True, exist_ok=True)

    def require_api_key(self) -> str:
        key = self.api_key.get_secret_value().strip() if self.api_key is not None else ""
        if not key:
            names = ", ".join(API_KEY_ENV_VARS)
            raise ConfigurationError(f"Gemini API key is not set. Set one of: {names}")
        return key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    redirect_limit: int = Field(
        default=3, ge=0, validation_alias="REDIRECT_LIMIT"
    )
    redirect_standards_compliant: bool = Field(
        default=False, validation_alias="REDIRECT_STANDARDS_COMPLIANT"
    )
    redirect_cookies: str = Field(
        default="disabled", validation_alias="REDIRECT_COOKIES"
    )
    redirect_clear_authorization: bool = Field(
        default=False, validation_alias="REDIRECT_CLEAR_AUTHORIZATION"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()

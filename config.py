"""
Application configuration.

Settings are read from the environment (prefix IMAGE_TOOL_, nested sections
separated by a double underscore) and an optional .env file, e.g.

    IMAGE_TOOL_FETCH__TIMEOUT_SECONDS=10
    IMAGE_TOOL_SYSTEM__LOG_LEVEL=DEBUG
"""

from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import FetchConstants, OutputConstants, RemoteConstants, SystemConstants


class FetchSettings(BaseModel):
    """Image download settings"""

    timeout_seconds: float = Field(FetchConstants.DEFAULT_TIMEOUT_SECONDS, gt=0)
    max_redirects: int = Field(FetchConstants.DEFAULT_MAX_REDIRECTS, ge=0)
    max_bytes: int = Field(FetchConstants.DEFAULT_MAX_BYTES, gt=0)
    user_agent: str = FetchConstants.DEFAULT_USER_AGENT


class RemoteSettings(BaseModel):
    """Remote AI service settings"""

    timeout_seconds: float = Field(RemoteConstants.DEFAULT_TIMEOUT_SECONDS, gt=0)
    max_retries: int = Field(0, ge=0, description="Retries performed by the OpenAI client")


class OutputSettings(BaseModel):
    """Result packaging settings"""

    binary_field: str = Field(OutputConstants.DEFAULT_BINARY_FIELD, min_length=1)


class SystemSettings(BaseModel):
    """System-wide settings"""

    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT
    log_format: str = SystemConstants.LOG_FORMAT

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in SystemConstants.VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(SystemConstants.VALID_LOG_LEVELS)}")
        return value


class Settings(BaseSettings):
    """Top-level settings"""

    model_config = SettingsConfigDict(
        env_prefix=SystemConstants.ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    fetch: FetchSettings = Field(default_factory=FetchSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

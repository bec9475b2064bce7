from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class ApiConfig(BaseSettings):
    """Location of the candidate service."""

    model_config = SettingsConfigDict(env_prefix="CANDIDATE_API_")

    base_url: str = "http://localhost:3010"
    timeout_seconds: float = 30.0  # seconds, enforced by the transport only

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


class LoggingConfig(BaseSettings):
    """Configuration for logging."""

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    log_file_path: Optional[Path] = None


class FormDataConfig(BaseSettings):
    """Inputs for the command-line submission."""

    profile_path: Optional[Path] = Field(
        None, validation_alias=AliasChoices("CANDIDATE_PROFILE_PATH", "profile_path")
    )
    cv_path: Optional[Path] = Field(
        None, validation_alias=AliasChoices("CV_PATH", "cv_path")
    )


class AppConfig(BaseSettings):
    """Root configuration class for the application."""

    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()
    form_data: FormDataConfig = FormDataConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Instantiate the main config object
config = AppConfig()

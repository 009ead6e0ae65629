from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Dict


_SECRET_FIELDS = ("cloudinary_api_key", "cloudinary_api_secret", "gemini_api_key")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        # Make field names case-insensitive for environment variables
        case_sensitive=False,
        frozen=True,
    )

    app_name: str = "Resume Analyzer API"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 5000

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "*"

    # Transient local storage for incoming uploads
    upload_dir: str = "files"

    # Cloudinary (media storage)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    storage_folder: str = "resumes"

    # AI/LLM Configuration
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "GoogleGenAI"),
    )
    gemini_model: str = "gemini-2.5-flash"

    # Outbound call limits
    storage_timeout_seconds: float = 60.0
    fetch_timeout_seconds: float = 30.0
    completion_timeout_seconds: float = 120.0
    outbound_retries: int = Field(default=1, ge=0)
    retry_backoff_seconds: float = 1.0

    validate_artifacts: bool = True

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def redacted(self) -> Dict[str, object]:
        """Settings as a dict with credentials masked, safe for logs"""
        values = self.model_dump()
        for name in _SECRET_FIELDS:
            values[name] = "***" if values[name] else ""
        return values


@lru_cache()
def get_settings() -> Settings:
    return Settings()

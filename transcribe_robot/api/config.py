"""
Configuration for the webhook API
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API configuration settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Server configuration
    service_name: str = "transcribe_robot_api"
    host: str = "0.0.0.0"
    port: int = 8002
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # CORS
    cors_origins: list[str] = ["*"]


def get_settings() -> APISettings:
    """Get settings instance"""
    return APISettings()

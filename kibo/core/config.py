"""
Application configuration.

Loads settings from environment variables and .env file.
Settings are frozen once loaded and are handed to each middleware
instance explicitly at construction.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvelopeSettings(BaseSettings):
    """Envelope layer settings loaded from environment.

    Attributes:
        project_name: Display name for the demo API.
        version: Current package version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        expose_errors: Leak failure messages and the original response
            body into error envelopes. Must be False in production.
    """

    model_config = SettingsConfigDict(
        env_prefix="KIBO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    project_name: str = "Kibo"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    expose_errors: bool = False


settings = EnvelopeSettings()

"""
Application Configuration
=========================
Uses pydantic-settings to load environment variables into a typed Settings object.
The plausibility band is the most important setting: results outside it are
still returned, but flagged so the assessor can double-check the readings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    The .env file is automatically read thanks to the model_config below.
    """

    # Application metadata
    APP_NAME: str = "Body Composition Engine"
    APP_VERSION: str = "1.0.0"

    # Root logger level (DEBUG, INFO, WARNING, ...)
    LOG_LEVEL: str = "INFO"

    # Origins allowed to call the API from a browser
    CORS_ORIGINS: list[str] = ["*"]

    # Sanity band for body fat % (results outside it get is_plausible=False)
    PLAUSIBLE_FAT_MIN_PERCENT: float = 2.0
    PLAUSIBLE_FAT_MAX_PERCENT: float = 60.0

    model_config = {"env_file": ".env", "extra": "ignore"}


# Singleton instance — import this everywhere you need settings
settings = Settings()

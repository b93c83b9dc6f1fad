"""
Application Settings
Load from environment variables
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Asia/Kolkata"
    # presets.yml ships inside this package
    CONFIG_DIR: Path = Path(__file__).resolve().parent

    # ======================
    # Round-up defaults
    # ======================
    ROUNDUP_NEAREST: int = 10
    ROUNDUP_MIN: float = 1.0
    ROUNDUP_MAX: float = 50.0
    WEEKLY_TARGET: float = 200.0

    # ======================
    # Portfolio
    # ======================
    DEFAULT_PRESET: str = "balanced"

    # ======================
    # Price simulation
    # ======================
    PRICE_VARIATION_PCT: float = 2.0
    DEFAULT_BASE_PRICE: float = 100.0

    # ======================
    # Scheduler
    # ======================
    SCHEDULER_ENABLED: bool = False
    SWEEP_DAY_OF_WEEK: str = "sun"
    SWEEP_HOUR: int = 10
    SWEEP_MINUTE: int = 0

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()

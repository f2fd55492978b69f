# aurora/config/settings.py
"""
Runtime settings for Aurora Risk Lab

Values come from the environment or an optional ``aurora/.env`` file.
Risk-model constants live here so deployments can tune them without code
changes; the defaults reproduce the dashboard's published behavior.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """
    Aurora settings (upper-case names match environment variables)
    """

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Aurora Risk Lab"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = Field(default="INFO", pattern="^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="text", pattern="^(text|json)$")
    LOG_FILE_PATH: str | None = None

    # Price history (CoinGecko)
    COINGECKO_API_URL: str = "https://api.coingecko.com/api/v3"
    COINGECKO_API_KEY: str | None = None
    COINGECKO_RATE_LIMIT: int = 30  # requests per minute (public tier)
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # OHLC caching
    OHLC_CACHE_TTL: int = 24 * 60 * 60
    OHLC_MAX_CONCURRENT: int = 5
    REDIS_URL: str = "redis://localhost:6379/0"

    # Risk model
    CONCENTRATION_RISK_THRESHOLD: float = 0.25
    MOCK_VOLATILITY_FACTOR: float = 0.05  # assumed daily loss
    VAR_CONFIDENCE_LEVEL: float = 0.95
    DEFAULT_TIME_HORIZON_DAYS: int = 1

    # Backtesting
    BACKTEST_BASELINE_VALUE: float = 1000.0

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("CONCENTRATION_RISK_THRESHOLD", "MOCK_VOLATILITY_FACTOR")
    @classmethod
    def validate_fraction(cls, v):
        if not 0 < v <= 1:
            raise ValueError("value must be a fraction in (0, 1]")
        return v

    @field_validator("VAR_CONFIDENCE_LEVEL")
    @classmethod
    def validate_confidence(cls, v):
        if not 0.01 <= v <= 0.99:
            raise ValueError("VAR_CONFIDENCE_LEVEL must be between 0.01 and 0.99")
        return v

    @field_validator(
        "OHLC_CACHE_TTL",
        "OHLC_MAX_CONCURRENT",
        "COINGECKO_RATE_LIMIT",
        "DEFAULT_TIME_HORIZON_DAYS",
        "BACKTEST_BASELINE_VALUE",
    )
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

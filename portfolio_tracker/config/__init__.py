"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Comma separated, e.g. "http://localhost:5173,http://localhost:3000"
    CORS_ORIGIN: str = (
        "https://financedashboardk.netlify.app,"
        "http://localhost:5173,"
        "http://localhost:3000"
    )

    # ======================
    # Holdings
    # ======================
    HOLDINGS_FILE: str = "data/holdings.csv"

    # ======================
    # Market Data
    # ======================
    PRICE_CACHE_TTL_SECONDS: float = 15.0
    UPSTREAM_TIMEOUT_SECONDS: float = 8.0
    GOOGLE_FINANCE_EXCHANGE: str = "NASDAQ"
    # Format: "JPM=NYSE,BAC=NYSE"
    GOOGLE_FINANCE_EXCHANGE_OVERRIDES: str = ""

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()

    @property
    def exchange_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for pair in self.GOOGLE_FINANCE_EXCHANGE_OVERRIDES.split(","):
            pair = pair.strip()
            if not pair or "=" not in pair:
                continue
            key, value = pair.split("=", 1)
            key = key.strip().upper()
            value = value.strip().upper()
            if key and value:
                overrides[key] = value
        return overrides


settings = Settings()

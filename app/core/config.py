from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "FinanceAnalytics"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=False)

    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:8000",
        ]
    )

    # Currency rates are relative to INR
    DEFAULT_CURRENCY: str = "INR"
    CURRENCY_RATES: Dict[str, float] = Field(
        default={"INR": 1.0, "USD": 0.012, "EUR": 0.011, "GBP": 0.0095}
    )

    # Preference defaults
    DEFAULT_SALARY: float = 0.0
    DEFAULT_SAVINGS_TARGET: float = 15000.0
    DEFAULT_BUDGET_GOALS: Dict[str, float] = Field(
        default={"Food": 15000.0, "Transport": 5000.0, "Shopping": 10000.0, "Entertainment": 3000.0}
    )

    # Month-over-month category increase (%) that triggers a warning insight
    INSIGHT_SPIKE_PERCENT: float = 20.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()

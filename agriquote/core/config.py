from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = True

    REDIS_URL: str

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 600  # 10 minutes

    IDEMPOTENCY_TTL: int = 300  # 5 minutes

    PRICING_CURRENCY: str = "EUR"
    PRICING_VERSION: str = "pricing_v2_rate_cards_mvp_001"

    API_TITLE: str = "Agri Drone Pricing Service"
    API_DESCRIPTION: str = "Rate cards and quote estimates for agricultural drone services"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()

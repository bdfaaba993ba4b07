from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Rainbow Tour Guides API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"  # development | production
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8

    ADMIN_SECRET_KEY: str = "change-this-admin-secret"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "rainbow_guides"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # HTTP
    ALLOWED_ORIGINS: str = "http://localhost:5000,http://localhost:5173"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # Pricing
    TRAVELER_FEE_PCT: int = 10
    PLATFORM_COMMISSION_PCT: int = 25
    PLATFORM_COMMISSION_MIN_USD: int = 25

    SLOT_CLEANUP_INTERVAL_SECONDS: int = 60

    # Per-IP request limits on /api (limits notation)
    RATE_LIMIT_PRODUCTION: str = "100 per 15 minutes"
    RATE_LIMIT_DEVELOPMENT: str = "1000 per 15 minutes"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def rate_limit(self) -> str:
        return self.RATE_LIMIT_PRODUCTION if self.is_production else self.RATE_LIMIT_DEVELOPMENT

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()

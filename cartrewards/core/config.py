from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from decimal import Decimal
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "CartRewards"
    APP_PORT: int = 9310
    DEBUG: bool = False

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "cartrewards"
    POSTGRES_PORT: int = 5432
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Transient DB failures
    DB_RETRY_ATTEMPTS: int = 3
    DB_RETRY_BASE_DELAY: float = 0.1

    # Cart sessions
    CART_TIMER_MINUTES: int = 30
    CART_UPDATE_MAX_RETRIES: int = 3
    DEFAULT_DELIVERY_FEE: Decimal = Decimal("300.00")

    # Storefront poller
    CART_POLL_INTERVAL_SECONDS: float = 2.0

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()

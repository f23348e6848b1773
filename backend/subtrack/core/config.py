from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "subtrack"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/subtrack.db"
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Cycle used when a persisted cycle_kind/cycle_duration pair is unreadable
    FALLBACK_CYCLE_KIND: str = "MONTHLY"
    FALLBACK_CYCLE_DURATION: int = 1

    # Hour (server time) at which the worker re-anchors auto-renewing subscriptions
    AUTO_RENEWAL_SWEEP_HOUR: int = 0


settings = Settings()

# matchpoint/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the process environment; a local .env is honoured
    # for development runs outside Docker.
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # The environment mode: 'local', 'test' or 'prod'
    ENV: str = "local"

    DATABASE_URL: str = "sqlite:///./matchpoint.db"

    # Identity provider shares this secret to sign bearer tokens
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_ENABLED: bool = False

    # --- Registration tuning ---
    # Attempts for one capacity-gate transaction before giving up
    CAPACITY_TX_MAX_RETRIES: int = 5
    # Upper bound of the random pause before retry n is n * this value
    CAPACITY_TX_RETRY_BACKOFF_SECONDS: float = 0.02
    # Number of past games considered when scoring a waitlisted user
    PRIORITY_HISTORY_WINDOW: int = 10

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Create a single instance of the settings
settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str | None = None

    BROWSER_HEADLESS: bool = True
    BROWSER_TIMEOUT_SECONDS: float = 30.0
    BROWSER_VIEWPORT_WIDTH: int = 1280
    BROWSER_VIEWPORT_HEIGHT: int = 800

    RETRY_ATTEMPTS: int = 3
    RETRY_DELAY_SECONDS: float = 1.0
    CONFIRMATION_TIMEOUT_SECONDS: float = 10.0
    REQUIRE_CONFIRMATION: bool = True

    BOOKING_TIMEZONE: str = "UTC"
    MAX_CONCURRENT_BOOKINGS: int = 2
    BOOKING_QUEUE_SIZE: int = 20


settings = Settings()

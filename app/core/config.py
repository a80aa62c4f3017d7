from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BOOKING_WINDOW_DAYS: int = 30
    BOOKING_OPENING_HOUR: int = 9
    BOOKING_CLOSING_HOUR: int = 19
    BOOKING_SLOT_MINUTES: int = 45

    SLOT_AVAILABILITY_RATIO: float = 0.7
    SLOT_AVAILABILITY_SEED: int | None = None

    BOOKING_SUBMIT_DELAY_SECONDS: float = 2.0
    BOOKING_SUBMIT_TIMEOUT_SECONDS: float = 10.0
    BOOKING_SESSION_TTL_SECONDS: float = 3600.0

    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_BOOKINGS_TABLE: str = "bookings"

    WIDGET_DEFAULT_THEME: str = "light"
    WIDGET_DEFAULT_LANG: str = "es"


settings = Settings()

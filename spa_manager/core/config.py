from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "Your Spa"
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    STORE_DATA_DIR: str = "./data"

    SLOT_GRID_START: str = "2:00 PM"
    SLOT_GRID_END: str = "7:30 PM"
    SLOT_INTERVAL_MINUTES: int = 30
    APPOINTMENT_DURATION_MINUTES: int = 60
    MIN_GAP_MINUTES: int = 30
    BOOKING_HORIZON_DAYS: int = 45

    CHAT_CANCEL_REASON: str = "Cancelled via chat assistant"


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STUDIO_NAME: str = "Kapture Nook Studio"
    STUDIO_CONTACT_EMAIL: str = "hello@kapturenook.example"
    STUDIO_TIMEZONE: str = "Asia/Manila"
    SLOT_START_HOUR: int = 9
    SLOT_END_HOUR: int = 17

    ADMIN_PASSWORD: str = ""

    # "memory", "json" or "supabase"; empty picks one from ENV and credentials
    STORE_PROVIDER: str = ""
    BOOKINGS_DATA_FILE: str = "./data/bookings.json"

    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_TABLE: str = "bookings"

    RESEND_API_KEY: str | None = None
    FROM_EMAIL: str = "Kapture Nook <studio@kapturenook.com>"

    HTTP_TIMEOUT_SECONDS: float = 10.0


settings = Settings()

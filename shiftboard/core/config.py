from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOCALE: str = "he"

    # Auth
    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    MIN_PASSWORD_LENGTH: int = 6

    # Database
    DATABASE_URL: str = "sqlite:///./shiftboard.db"

    # Rules
    CATALOG_VARIANT: str = "extended"  # extended | weekend_manager_only
    ENFORCE_VALIDATION_ON_APPROVE: bool = True

    # Submission deadline
    DEADLINE_MODE: str = "explicit"  # explicit | auto
    DEADLINE_OFFSET_DAYS: int = 2
    DEADLINE_HOUR: int = 12
    TIMEZONE_OFFSET_HOURS: int = 2

    # Stats
    STATS_WINDOW_MONTHS: int = 1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()

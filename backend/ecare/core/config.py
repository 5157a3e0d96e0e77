from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "E-CARE Complaint Service"
    version: str = "1.0.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/ecare.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Notifications
    NOTIFICATION_TIMEZONE: str = "Asia/Kuala_Lumpur"
    NOTIFICATION_CATALOG_PATH: str = ""  # i18next-style JSON file used for rendering
    NOTIFICATION_LIST_LIMIT: int = 50


settings = Settings()

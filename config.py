from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    CLIENT_EMAIL: str
    FIREBASE_PRIVATE_KEY: str
    PROJECT_ID: str
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Google OAuth2 / FCM
    TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Scheduler Settings
    ENABLE_SCHEDULER: bool = False
    REMINDER_INTERVAL_MINUTES: int = 60

    # Cron API Key for external trigger
    CRON_API_KEY: str = "change-me-in-production"

    class Config:
        env_file = ".env"


settings = Settings()

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    """

    GOOGLE_APPLICATION_CREDENTIALS: str
    FIREBASE_PROJECT_ID: str
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.5-pro"
    REDIS_URL: str

    BLUEPRINT_GENERATOR: Literal["gemini", "local"] = "gemini"
    ONBOARDING_SESSION_TTL_SECONDS: int = 7 * 24 * 60 * 60
    SPLASH_PREVIEW_SECONDS: float = 2.0
    SPLASH_DURATION_SECONDS: float = 2.5
    BLUEPRINT_STALE_AFTER_SECONDS: float = 120.0
    AUTH_CACHE_SIZE: int = 1024
    AUTH_CACHE_TTL_SECONDS: int = 50 * 60

    class Config:
        env_file = ".env"


settings = Settings()

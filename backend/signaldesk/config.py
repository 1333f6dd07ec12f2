from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration.

    Everything is read from environment variables (or a local `.env` file).
    Leaving the backend credentials empty is a valid setup: the app then runs
    purely on the in-memory demo data.
    """

    APP_NAME: str = "SignalDesk"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]

    # "auto" picks Supabase first, then Firebase, then mock mode.
    BACKEND_PROVIDER: Literal["auto", "supabase", "firebase", "mock"] = "auto"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    # Only needed to remove auth identities on user deletion.
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Firebase (web app config)
    FIREBASE_API_KEY: str = ""
    FIREBASE_AUTH_DOMAIN: str = ""
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_STORAGE_BUCKET: str = ""
    FIREBASE_MESSAGING_SENDER_ID: str = ""
    FIREBASE_APP_ID: str = ""

    # Gemini chart analysis
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Simulated latency of the mock mode
    MOCK_DELAY_SECONDS: float = 0.8
    BACKTEST_DELAY_SECONDS: float = 2.0

    # When False, deleting a user only removes the admin-visible record and
    # leaves the login identity in place.
    DELETE_REMOVES_IDENTITY: bool = False

    HTTP_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

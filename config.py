from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Server
    HOST: str = "localhost"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Session Management
    SESSION_EXPIRY_HOURS: int = 24 * 14
    SESSION_COOKIE_NAME: str = "solotter_session"
    SESSION_SAME_SITE: str = "lax"
    SESSION_HTTPS_ONLY: bool = False  # Set to True in production

    # Security
    SECRET_KEY: str = "your-secret-key-here"  # Change this in production!

    # Twitter OAuth Settings
    TWITTER_CONSUMER_KEY: Optional[str] = None
    TWITTER_CONSUMER_SECRET: Optional[str] = None
    TWITTER_OAUTH_CALLBACK_URL: str = "http://localhost:8080/auth/callback"

    # Twitter REST API Settings
    TWITTER_API_BASE_URL: str = "https://api.twitter.com/1.1"
    TWITTER_API_TIMEOUT_SECONDS: float = 30.0
    TWITTER_API_MAX_ATTEMPTS: int = 3  # GET requests only; POSTs are never retried
    TWITTER_API_RETRY_BACKOFF_SECONDS: float = 1.0

    class Config:
        env_file = ".env"
        extra = "ignore"  # Allow extra fields from environment variables

@lru_cache()
def get_settings():
    return Settings()

import os
from functools import lru_cache

from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Bizwriter API")
    VERSION: str = os.getenv("VERSION", "0.1.0")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # sqlite:// keeps everything in memory for the life of the process
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://")

    SESSION_SECRET_KEY: str = os.getenv("SESSION_SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    SESSION_ALGORITHM: str = os.getenv("SESSION_ALGORITHM", "HS256")
    SESSION_EXPIRES_MINUTES: int = int(os.getenv("SESSION_EXPIRES_MINUTES", 60 * 24))
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "session")

    ARGON2_ROUNDS: int = int(os.getenv("ARGON2_ROUNDS", 3))
    ARGON2_MEMORY_COST: int = int(os.getenv("ARGON2_MEMORY_COST", 65536))
    ARGON2_PARALLELISM: int = int(os.getenv("ARGON2_PARALLELISM", 4))

    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_REDIRECT_URI: str = os.getenv("GOOGLE_REDIRECT_URI", "")

    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")


@lru_cache
def get_settings() -> Settings:
    return Settings()

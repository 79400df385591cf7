# taskdesk/config/settings.py
# Runtime configuration read from the environment (and .env when present)

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    """Application settings"""

    # Table store
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskdesk.db")
    DB_SSLMODE = os.getenv("DB_SSLMODE")

    # Tokens
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
    REQUIRE_TOKEN = _env_bool("TASKDESK_REQUIRE_TOKEN", False)

    # HTTP
    CORS_ORIGINS = _env_list("CORS_ORIGINS", [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ])

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()

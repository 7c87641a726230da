import os

from dotenv import load_dotenv

load_dotenv()


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "y", "yes", "on"}


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# HTTP server (python -m movies.main)
HOST = os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0"
PORT = _get_env_int("PORT", 4040)

# Database. DATABASE_URL wins over the individual DB_* parts.
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
DB_HOST = os.getenv("DB_HOST", "localhost").strip() or "localhost"
DB_PORT = _get_env_int("DB_PORT", 3306)
DB_USER = os.getenv("DB_USER", "root")
DB_PASS = os.getenv("DB_PASS", "")
DB_NAME = os.getenv("DB_NAME", "movies_collection").strip() or "movies_collection"
DB_ECHO = _get_env_bool("DB_ECHO", False)
DB_CONNECT_RETRIES = _get_env_int("DB_CONNECT_RETRIES", 10)
DB_RETRY_DELAY = _get_env_int("DB_RETRY_DELAY", 3)

# Listing window
DEFAULT_PAGE_LIMIT = _get_env_int("MOVIES_DEFAULT_PAGE_LIMIT", 10)
MAX_PAGE_LIMIT = _get_env_int("MOVIES_MAX_PAGE_LIMIT", 100)

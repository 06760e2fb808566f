"""Runtime configuration read from the environment, plus logging setup."""
import logging
import os
import sys

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
SQL_ECHO = os.getenv("SQL_ECHO", "0") == "1"

JWT_SECRET = os.getenv("JWT_SECRET", "trendly-secret-key-change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
TOKEN_TTL_DAYS = int(os.getenv("TOKEN_TTL_DAYS", "7"))

SERPAPI_KEY = os.getenv("SERPAPI_KEY", "")
SOURCE_TIMEOUT = float(os.getenv("SOURCE_TIMEOUT", "15"))

# Seed the in-memory catalog with sample products at startup
SEED_CATALOG = os.getenv("SEED_CATALOG", "1") == "1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a console handler to the ``trendly`` logger.

    Safe to call repeatedly (app factory, tests); handlers are added once.
    """
    logger = logging.getLogger("trendly")
    logger.setLevel(level or LOG_LEVEL)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    return logger

import os
import logging
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskmaster.db")
# Offline development: keep all records in memory instead of the SQL mirror
USE_MOCK_DATA = os.getenv("USE_MOCK_DATA", "false").lower() in ("1", "true", "yes")
DB_ENCRYPTION_KEY = os.getenv("DB_ENCRYPTION_KEY")

ALLOWED_ORIGINS = [o.strip() for o in os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv(
    "ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0,testserver"
).split(",") if h.strip()]

RATE_LIMIT_BULK = os.getenv("RATE_LIMIT_BULK", "30/minute")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Python weekday() numbering, Sunday-start weeks
WEEK_STARTS_ON = 6


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

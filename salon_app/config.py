import os
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# In case pytest tests/ -v is run, it will also read tests/.env.test
if "pytest" in sys.modules or os.environ.get("TESTING") == "True":
    test_env_path = Path(__file__).parent.parent / "tests" / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path, override=True)

TESTING = "pytest" in sys.modules or os.environ.get("TESTING") == "True"
FLASK_ENV = os.environ.get("FLASK_ENV")


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(name, default):
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


def is_in_memory_database(db_url: str) -> bool:
    """True when the URL points at a process-lifetime SQLite database."""
    if not db_url:
        return True
    return db_url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in db_url


url = os.environ.get("DATABASE_URL", "sqlite:///:memory:")

# Fix MySQL URL format if needed
if url.startswith("mysql://"):
    url = url.replace("mysql://", "mysql+pymysql://", 1)

if TESTING:
    # Tests always get a throwaway store
    url = "sqlite:///:memory:"


class Config:
    SQLALCHEMY_DATABASE_URI = url
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretdevkey123")
    TESTING = TESTING

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    JSON_AS_ASCII = False

    # Auth
    JWT_EXPIRES_HOURS = env_int("JWT_EXPIRES_HOURS", 1)
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 4 if TESTING else 12)

    # Localization
    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "ar")

    # Demo data is loaded into the store on startup
    SEED_DEMO_DATA = env_bool("SEED_DEMO_DATA", True)

    # Payments
    STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY", "")
    PAYMENT_CURRENCY = os.environ.get("PAYMENT_CURRENCY", "sar")
    LOYALTY_POINTS_PER_BOOKING = env_int("LOYALTY_POINTS_PER_BOOKING", 10)

    # Recommendations
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")
    RECOMMENDATION_DEFAULT_LIMIT = env_int("RECOMMENDATION_DEFAULT_LIMIT", 3)
    RECOMMENDATION_MAX_LIMIT = env_int("RECOMMENDATION_MAX_LIMIT", 5)

    # Stale pending bookings are only expired when this is switched on
    EXPIRE_STALE_PENDING_BOOKINGS = env_bool("EXPIRE_STALE_PENDING_BOOKINGS", False)
    PENDING_BOOKING_TTL_HOURS = env_int("PENDING_BOOKING_TTL_HOURS", 24)
    SCHEDULER_INTERVAL_MINUTES = env_int("SCHEDULER_INTERVAL_MINUTES", 5)

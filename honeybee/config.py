# HONEYBEE/backend/honeybee/config.py

import os
import logging
from dotenv import load_dotenv
from pathlib import Path

logger = logging.getLogger(__name__)

# Absolute path of the package directory (honeybee/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Load variables from the .env file when present
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    logger.info(f"Loaded .env from {env_path}")
else:
    load_dotenv()

# ============================================
# ENVIRONMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ============================================
# DATABASE
# ============================================
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    if ENVIRONMENT == "production":
        raise ValueError("DATABASE_URL must be set in production")
    DATABASE_URL = "sqlite:///./honeybee.db"
    logger.warning("DATABASE_URL not set, falling back to %s", DATABASE_URL)

# ============================================
# SESSIONS
# ============================================
SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory").lower()  # memory | file | redis
SESSION_DIR = os.getenv("SESSION_DIR", "./.sessions")
SESSION_KEY = os.getenv("SESSION_KEY", "employee_session")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "86400"))  # 0 = no expiry

# ============================================
# REDIS (session backend)
# ============================================
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# ============================================
# PASSWORD POLICY (employee creation)
# ============================================
PASSWORD_POLICY = {
    "min_length": int(os.getenv("PASSWORD_MIN_LENGTH", "6")),
    "require_uppercase": os.getenv("PASSWORD_REQUIRE_UPPERCASE", "false").lower() == "true",
    "require_lowercase": os.getenv("PASSWORD_REQUIRE_LOWERCASE", "false").lower() == "true",
    "require_numbers": os.getenv("PASSWORD_REQUIRE_NUMBERS", "false").lower() == "true",
    "require_special_chars": os.getenv("PASSWORD_REQUIRE_SPECIAL", "false").lower() == "true",
}

# bcrypt cost factor for employee passwords
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# ============================================
# ANALYTICS
# ============================================
DEFAULT_TIME_RANGE = os.getenv("DEFAULT_TIME_RANGE", "6months")

# ============================================
# CORS (frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8080").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_password_policy():
    """Returns the employee password policy"""
    return PASSWORD_POLICY


def is_production():
    return ENVIRONMENT == "production"


def is_development():
    return ENVIRONMENT == "development"

# campusvote/config.py
# Central place for settings and constants
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Database Config ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "campus_vote")
# Multi-document transactions need a replica set; standalone servers use
# the two-phase pending/commit path in storage_mongo.
MONGO_TRANSACTIONS = _flag("MONGO_TRANSACTIONS")

STUDENTS_COLLECTION = "students"
ELECTIONS_COLLECTION = "elections"
POSITIONS_COLLECTION = "positions"
CANDIDATES_COLLECTION = "candidates"
VOTES_COLLECTION = "votes"
ADMINS_COLLECTION = "admins"

# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 24 * 60))
TOKEN_COOKIE_NAME = "token"
COOKIE_SECURE = _flag("COOKIE_SECURE")

# Admin account created by `python -m campusvote.seed`
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me-admin")

# --- HTTP Config ---
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

# --- Voting rules ---
# When on, a ballot must carry one selection for every position.
REQUIRE_COMPLETE_BALLOT = _flag("REQUIRE_COMPLETE_BALLOT")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

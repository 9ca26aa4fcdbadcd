"""Configuration module for the Challenge Portal backend.

This module provides centralized configuration management, including directory
paths, database and API server settings, authentication and competition rules.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (database file and uploaded submissions live here)
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data"))).resolve()

# Uploaded submission files
UPLOADS_DIR = Path(
    os.getenv("UPLOADS_DIR", str(DATA_DIR / "uploads" / "submissions"))
).resolve()

# Public URL prefix under which stored submissions are referenced
UPLOADS_URL_PREFIX: str = os.getenv("UPLOADS_URL_PREFIX", "/uploads/submissions")

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/challenge_portal.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Stop the process on errors that escape every handler (a supervisor restarts it)
FATAL_ERROR_GUARD: bool = os.getenv("FATAL_ERROR_GUARD", "true").lower() == "true"

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "30"))

# Session cookie carrying the same JWT for browser clients
AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "token")
AUTH_COOKIE_SECURE: bool = os.getenv("AUTH_COOKIE_SECURE", "false").lower() == "true"

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

MIN_PASSWORD_LENGTH: int = 6

# --- Competition Rules ---

# First team code handed out; later codes count up from here
TEAM_CODE_BASE: int = int(os.getenv("TEAM_CODE_BASE", "12300"))

# Maximum roster size, leader included
MAX_TEAM_MEMBERS: int = int(os.getenv("MAX_TEAM_MEMBERS", "5"))

# Maximum size of an uploaded submission in bytes
MAX_SUBMISSION_SIZE: int = int(os.getenv("MAX_SUBMISSION_SIZE", str(5 * 1024 * 1024)))

ALLOWED_SUBMISSION_CONTENT_TYPES: List[str] = ["application/pdf"]

DEFAULT_TASK_MAX_MARKS: int = 100

# --- Seed Admin Configuration ---

SEED_ADMIN_NAME: str = os.getenv("SEED_ADMIN_NAME", "Super Admin")
SEED_ADMIN_EMAIL: str = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")
SEED_ADMIN_PHONE: str = os.getenv("SEED_ADMIN_PHONE", "9999999999")
SEED_ADMIN_PASSWORD: Optional[str] = os.getenv("SEED_ADMIN_PASSWORD")

"""
Configuration settings for the application
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Since we're in exam_platform/core/, we need to go up 2 levels to get to project root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Database Configuration
DATABASE_DIR = os.path.join(BASE_DIR, "data")
DATABASE_PATH = os.path.join(DATABASE_DIR, "app.db")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_PATH}")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Header carrying the caller identity (compared by exact value, never verified)
CALLER_HEADER = os.getenv("CALLER_HEADER", "X-Caller")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Who besides the student may read a student's exam result:
# - "any":   any registered tutor
# - "owner": only the tutor owning the exam's course
RESULTS_TUTOR_SCOPES = ("any", "owner")


def parse_results_scope(value: str) -> str:
    scope = (value or "").strip().lower()
    if scope not in RESULTS_TUTOR_SCOPES:
        raise ValueError(
            f"RESULTS_TUTOR_SCOPE must be one of {', '.join(RESULTS_TUTOR_SCOPES)}, got {value!r}"
        )
    return scope


RESULTS_TUTOR_SCOPE = parse_results_scope(os.getenv("RESULTS_TUTOR_SCOPE", "any"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

"""
Application configuration using python-dotenv.

This module loads environment variables from .env file into os.environ
for use throughout the application.
"""

import os
import pathlib
from dotenv import load_dotenv


# Determine if we're running in a test environment
# Don't load .env file during testing to ensure predictable test behavior
is_testing = os.getenv("PYTEST_VERSION") is not None or any("pytest" in str(frame) for frame in __import__('inspect').stack(0))

# Load .env file into os.environ (only outside of testing)
if not is_testing:
    # Try multiple possible locations for .env file
    possible_paths = [
        pathlib.Path(__file__).parent.parent.parent / ".env",  # backend/.env (when run from backend/src)
        pathlib.Path(__file__).parent.parent.parent.parent / ".env",  # .env (when run from src)
        pathlib.Path.cwd() / ".env",  # .env in current directory
        pathlib.Path.cwd().parent / ".env",  # .env in parent directory
    ]

    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


# Configuration constants with defaults
# These match the environment variables defined in .env.example
def get_database_url():
    """Get the database URL from environment."""
    return os.getenv(
        "DATABASE_URL",
        "sqlite:///./clinic_scheduling.db"
    )

DATABASE_URL = get_database_url()
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Suggestion grid used when a requested slot is unavailable.
# Clinic standard hours, not a business rule: override per deployment.
SUGGESTION_DAY_START = os.getenv("SUGGESTION_DAY_START", "08:00")
SUGGESTION_DAY_END = os.getenv("SUGGESTION_DAY_END", "18:00")
SUGGESTION_SLOT_GRANULARITY_MINUTES = int(os.getenv("SUGGESTION_SLOT_GRANULARITY_MINUTES", "30"))
MAX_SUGGESTED_TIMES = int(os.getenv("MAX_SUGGESTED_TIMES", "3"))

"""
Basic configuration

- CORS origins for development and production
- Storage and library locations, cache TTL and log level
- Supports environment variables (loaded from .env in main)
"""
import os
from pathlib import Path

# Default localhost origins for development
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8081",
]

# Get additional CORS origins from environment variable
ADDITIONAL_CORS_ORIGINS = os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []

# Filter out empty strings from split
ADDITIONAL_CORS_ORIGINS = [origin.strip() for origin in ADDITIONAL_CORS_ORIGINS if origin.strip()]

# Combine default and additional origins
CORS_ORIGINS = DEFAULT_CORS_ORIGINS + ADDITIONAL_CORS_ORIGINS

# JSON file storage root for progress and submissions
DATA_DIR = os.getenv("DATA_DIR", "data")

# Question block / intake path definitions shipped with the package
LIBRARY_DIR = Path(os.getenv("LIBRARY_DIR", str(Path(__file__).parent.parent / "library")))

LIBRARY_CACHE_TTL_SECONDS = int(os.getenv("LIBRARY_CACHE_TTL_SECONDS", "300"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

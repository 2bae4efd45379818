"""
Configuration for the JSON document stores and the HTTP layer.
Values come from the environment (optionally a .env file).
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Directory holding one <collection>.json document per entity
DATA_DIR = os.getenv("DATA_DIR", "./data")

# Written into fresh documents and patched into documents that lack it
SCHEMA_VERSION = os.getenv("SCHEMA_VERSION", "1.0")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

RECENT_ORDERS_LIMIT = int(os.getenv("RECENT_ORDERS_LIMIT", "10"))

# Comma separated list of allowed browser origins
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

VERSION = "1.0.0"

# Entity collections, each persisted under DATA_DIR/<name>.json
COLLECTIONS = ("users", "orders", "carts", "products", "payments")


def get_data_dir() -> Path:
    """Get the data directory, re-reading the environment."""
    return Path(os.getenv("DATA_DIR", DATA_DIR))


def get_document_path(collection: str) -> Path:
    """Path of the JSON document backing a collection."""
    return get_data_dir() / f"{collection}.json"


def get_schema_version() -> str:
    return os.getenv("SCHEMA_VERSION", SCHEMA_VERSION)


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_cors_origins() -> List[str]:
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]


def ensure_data_directory() -> None:
    """Ensure the data directory exists."""
    get_data_dir().mkdir(parents=True, exist_ok=True)


def validate_config() -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if not get_schema_version().strip():
        issues.append("SCHEMA_VERSION must not be empty")

    if RECENT_ORDERS_LIMIT < 1:
        issues.append("RECENT_ORDERS_LIMIT must be >= 1")

    data_dir = get_data_dir()
    if data_dir.exists() and not data_dir.is_dir():
        issues.append(f"DATA_DIR is not a directory: {data_dir}")

    return issues

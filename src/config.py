"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (users
API location and credentials, retry policy, cache bounds and logging).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# Users API
USERS_API_BASE_URL = os.environ.get("USERS_API_BASE_URL", "https://reqres.in/api").strip()
USERS_API_KEY = os.environ.get("USERS_API_KEY", "reqres-free-v1").strip()
USERS_API_TIMEOUT = _env_float("USERS_API_TIMEOUT", 20.0)
USERS_RETRY_ATTEMPTS = _env_int("USERS_RETRY_ATTEMPTS", 3)
USERS_RETRY_DELAY = _env_float("USERS_RETRY_DELAY", 1.0)

# Cache
CACHE_DEFAULT_TTL_MS = _env_int("CACHE_DEFAULT_TTL_MS", 10 * 60 * 1000)
CACHE_MAX_SIZE = _env_int("CACHE_MAX_SIZE", 100)
CACHE_CLEANUP_INTERVAL = _env_float("CACHE_CLEANUP_INTERVAL", 60.0)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (backend
base URL, timeouts, cache TTLs, token storage and exchange endpoints).
"""

from __future__ import annotations

import os
from pathlib import Path


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


# Backend
API_BASE_URL = os.environ.get("API_BASE_URL", "https://cupo.site").strip()
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)
REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", 15.0)

# Caching (seconds)
API_CACHE_TTL = _env_float("API_CACHE_TTL", 120.0)
CACHE_SWEEP_INTERVAL = _env_float("CACHE_SWEEP_INTERVAL", 30.0)
CACHE_MAXSIZE = _env_int("CACHE_MAXSIZE", 0)  # 0 = unbounded

# Auth token storage
TOKEN_STORE_PATH = Path(
    os.environ.get("TOKEN_STORE_PATH", str(Path.home() / ".cupo" / "auth.json"))
).expanduser()

# Federated login token exchange
FEDERATED_ISSUER = os.environ.get("FEDERATED_ISSUER", "supabase").strip()
TOKEN_EXCHANGE_PATH = os.environ.get("TOKEN_EXCHANGE_PATH", "/auth/exchange-token").strip()
TOKEN_EXCHANGE_FALLBACK_PATH = os.environ.get(
    "TOKEN_EXCHANGE_FALLBACK_PATH", "/auth/supabase/exchange"
).strip()

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

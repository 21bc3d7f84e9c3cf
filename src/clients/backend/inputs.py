from __future__ import annotations

from typing import Iterable, Optional, Tuple

from core.errors import ValidationError


_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE"}

LOGIN_PATH = "/auth/login"
SIGNUP_PATH = "/auth/signup"
LOGOUT_PATH = "/auth/logout"

_PUBLIC_EXACT = (LOGIN_PATH, SIGNUP_PATH)
_PUBLIC_FAMILIES = ("/auth/forgot-password", "/auth/reset-password")


def normalize_endpoint(endpoint: str) -> str:
    # Backend-relative path: always starts with a single "/"
    ep = (endpoint or "").strip()
    if not ep:
        raise ValidationError("endpoint must be non-empty")
    if "://" in ep:
        raise ValidationError("endpoint must be a backend-relative path")
    return "/" + ep.lstrip("/")


def normalize_method(method: Optional[str]) -> str:
    m = (method or "GET").strip().upper()
    if m not in _METHODS:
        raise ValidationError(f"Unsupported HTTP method: {m}")
    return m


def normalize_patterns(patterns: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not patterns:
        return ()
    if isinstance(patterns, str):
        patterns = [patterns]
    return tuple(p.strip() for p in patterns if p and p.strip())


def is_public_endpoint(endpoint: str) -> bool:
    # Login/signup/password-reset never carry the Authorization header
    path = endpoint.split("?", 1)[0]
    if path in _PUBLIC_EXACT:
        return True
    return any(family in endpoint for family in _PUBLIC_FAMILIES)


def is_login_endpoint(endpoint: str) -> bool:
    return endpoint.split("?", 1)[0] == LOGIN_PATH

from __future__ import annotations

import json
from typing import Any

import httpx

from core.errors import AuthenticationError, BackendError, ParseError


def _error_payload(resp: httpx.Response) -> Any:
    # Error bodies that are not JSON degrade to a synthesized message
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {"error": f"HTTP error! status: {resp.status_code}"}


def error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        for field in ("error", "message"):
            value = payload.get(field)
            if isinstance(value, str) and value:
                return value
    return f"HTTP error! status: {status_code}"


def parse_success(resp: httpx.Response, *, endpoint: str) -> Any:
    if not resp.content or not resp.content.strip():
        return None
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(
            "Invalid JSON response from server",
            endpoint=endpoint,
            status_code=resp.status_code,
        ) from e


def authentication_error(resp: httpx.Response, *, endpoint: str) -> AuthenticationError:
    payload = _error_payload(resp)
    return AuthenticationError(
        error_message(payload, resp.status_code),
        endpoint=endpoint,
        status_code=resp.status_code,
        payload=payload,
    )


def backend_error(resp: httpx.Response, *, endpoint: str) -> BackendError:
    payload = _error_payload(resp)
    fields = payload if isinstance(payload, dict) else {}
    return BackendError(
        error_message(payload, resp.status_code),
        endpoint=endpoint,
        status_code=resp.status_code,
        payload=payload,
        current_status=fields.get("current_status"),
        recoverable_statuses=fields.get("recoverable_statuses"),
        contact_support=fields.get("contact_support"),
    )

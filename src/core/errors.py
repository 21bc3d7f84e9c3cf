from __future__ import annotations

from typing import Any, Optional


CONNECTIVITY_MESSAGE = "Connection error. Please check your internet connection."
TIMEOUT_MESSAGE = "The request timed out. Please check your internet connection."


class CupoGatewayError(Exception):
    """Base error for the backend gateway."""


class ValidationError(CupoGatewayError):
    """Raised when caller input is invalid."""


class RequestError(CupoGatewayError):
    """Raised when a backend request does not produce a usable result."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code
        self.payload = payload


class ConnectivityError(RequestError):
    """Raised when the network call could not complete (DNS, connect, timeout)."""

    def __init__(self, message: str = CONNECTIVITY_MESSAGE, *, timed_out: bool = False, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.timed_out = timed_out


class AuthenticationError(RequestError):
    """Raised on a 401 from a protected endpoint; stored credentials are gone."""


class BackendError(RequestError):
    """Raised when the backend reports a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        current_status: Optional[str] = None,
        recoverable_statuses: Optional[list] = None,
        contact_support: Optional[bool] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.current_status = current_status
        self.recoverable_statuses = recoverable_statuses
        self.contact_support = contact_support


class ParseError(RequestError):
    """Raised when a successful response body is not valid JSON."""

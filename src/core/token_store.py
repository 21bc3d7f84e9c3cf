"""Durable storage for the single auth token.

`FileTokenStore` keeps the token in a small JSON file so it survives
process restarts; `MemoryTokenStore` keeps it for the life of the
process only.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "auth_token"


class TokenStore(Protocol):
    """Contract for any auth token storage."""
    def get(self) -> Optional[str]:
        ...

    def set(self, token: str) -> None:
        ...

    def remove(self) -> None:
        ...


class MemoryTokenStore:
    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def remove(self) -> None:
        self._token = None


class FileTokenStore:
    def __init__(self, *, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Optional[str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable token file %s", self._path)
            return None

        token = data.get(AUTH_TOKEN_KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file, then swap it in
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps({AUTH_TOKEN_KEY: token}), encoding="utf-8")
        os.replace(tmp, self._path)
        logger.info("Auth token saved")

    def remove(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        logger.info("Auth token removed")

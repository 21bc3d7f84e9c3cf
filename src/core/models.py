"""Immutable request model used by the backend gateway.

`ApiRequest` carries one normalized call and derives the two keys the
gateway works with: the request key (coalescing in-flight calls) and the
cache key (GET response caching).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


def serialize_body(body: Any) -> str:
    """Canonical JSON for key derivation; a missing body serializes to ''."""
    if body is None:
        return ""
    return json.dumps(body, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class ApiRequest:
    """One logical backend call.

    Field groups:
    - Target: method, endpoint
    - Payload: body, headers
    - Caching: cache_ttl, use_cache, invalidate
    """

    endpoint: str
    method: str = "GET"

    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    cache_ttl: Optional[float] = None
    use_cache: bool = True
    invalidate: Tuple[str, ...] = ()

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @property
    def cacheable(self) -> bool:
        return self.is_get and self.use_cache

    @property
    def cache_key(self) -> str:
        return f"{self.endpoint}{serialize_body(self.body)}"

    @property
    def request_key(self) -> str:
        return f"{self.method}{self.endpoint}{serialize_body(self.body)}"

"""Federated login token exchange.

When a saved token was issued by the federated identity provider, it is
traded for a backend-native token before being stored. Detection reads
the token's `iss` claim WITHOUT verifying the signature: it only picks a
routing branch and is never an authentication decision. The backend
stays the sole authority on token validity.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

PostFn = Callable[[str, Mapping[str, Any]], Awaitable[httpx.Response]]


def decode_unverified_claims(token: str) -> Dict[str, Any]:
    """Decode a JWT payload segment without signature verification."""
    parts = (token or "").split(".")
    if len(parts) != 3 or not parts[1]:
        return {}

    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def is_federated_token(token: str, issuer_marker: str) -> bool:
    marker = (issuer_marker or "").strip().lower()
    if not marker:
        return False
    issuer = decode_unverified_claims(token).get("iss")
    return isinstance(issuer, str) and marker in issuer.lower()


async def exchange_federated_token(
    post: PostFn,
    token: str,
    *,
    paths: Sequence[str],
) -> Optional[str]:
    # Try each exchange endpoint in order; first access_token wins
    for path in paths:
        if not path:
            continue
        try:
            resp = await post(path, {"token": token})
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            logger.warning("Token exchange via %s failed: %s", path, e)
            continue

        if not resp.is_success:
            logger.warning("Token exchange via %s returned status %d", path, resp.status_code)
            continue

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Token exchange via %s returned a non-JSON body", path)
            continue

        exchanged = data.get("access_token") if isinstance(data, dict) else None
        if isinstance(exchanged, str) and exchanged:
            logger.info("Federated token exchanged via %s", path)
            return exchanged

        logger.warning("Token exchange via %s returned no access_token", path)

    return None

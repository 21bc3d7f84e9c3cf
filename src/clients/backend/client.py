"""Backend gateway: one async entry point for every call to the Cupo REST API.

`BackendClient.request` attaches the stored auth token, serves GETs from a
short-lived TTL cache, coalesces identical in-flight calls into a single
network request, normalizes failures into `core.errors` types, and on a
401 clears the session and notifies `SessionSignals` subscribers.
It never retries: a failed call surfaces immediately to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

import httpx

from core.cache import TTLCache
from core.errors import (
    CONNECTIVITY_MESSAGE,
    TIMEOUT_MESSAGE,
    ConnectivityError,
)
from core.inflight import InFlightTable
from core.models import ApiRequest
from core.signals import SessionExpired, SessionSignals
from core.token_store import MemoryTokenStore, TokenStore

from .exchange import exchange_federated_token, is_federated_token
from .inputs import (
    LOGOUT_PATH,
    is_login_endpoint,
    is_public_endpoint,
    normalize_endpoint,
    normalize_method,
    normalize_patterns,
)
from .responses import authentication_error, backend_error, parse_success

logger = logging.getLogger(__name__)

_MISS = object()


class BackendClient:
    """Async gateway to the Cupo backend.

    Purpose:
      - request(endpoint, method='GET', body=None, ...) -> parsed JSON
      - set_token / remove_token / logout for the session lifecycle
      - invalidate(pattern) to drop cached GET responses after mutations

    Key behavior:
      - At most one network call per (method, endpoint, body) is in flight.
      - GET responses are cached for `cache_ttl_seconds` unless overridden.
      - Public auth endpoints never receive the Authorization header.
    """

    JSON_ACCEPT = "application/json"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15.0,
        verify: bool = True,
        token_store: Optional[TokenStore] = None,
        cache: Optional[TTLCache[Any]] = None,
        cache_ttl_seconds: float = 120.0,
        signals: Optional[SessionSignals] = None,
        federated_issuer: str = "",
        exchange_paths: Sequence[str] = (),
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)

        self._token_store: TokenStore = token_store or MemoryTokenStore()
        self._cache: TTLCache[Any] = cache if cache is not None else TTLCache(ttl_seconds=cache_ttl_seconds)
        self._cache_ttl = float(cache_ttl_seconds)
        self._signals = signals if signals is not None else SessionSignals()
        self._in_flight = InFlightTable()
        # Bumped whenever the principal changes; stale responses are not cached
        self._session = 0

        self._federated_issuer = federated_issuer
        self._exchange_paths = tuple(p for p in exchange_paths if p)

        self._http: Optional[httpx.AsyncClient] = None

    # --- Collaborators ---

    @property
    def cache(self) -> TTLCache[Any]:
        return self._cache

    @property
    def in_flight(self) -> InFlightTable:
        return self._in_flight

    @property
    def signals(self) -> SessionSignals:
        return self._signals

    # --- Lifecycle ---

    async def __aenter__(self) -> "BackendClient":
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def start(self) -> None:
        self._cache.start_sweeper()

    async def aclose(self) -> None:
        pending = self._in_flight.tasks()
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self._http is not None:
            await self._http.aclose()
            self._http = None
        self._cache.destroy()

    # --- Session ---

    def get_token(self) -> Optional[str]:
        return self._token_store.get()

    async def set_token(self, token: str) -> None:
        """Persist `token`, exchanging federated tokens for backend-native ones first."""
        to_store = token
        if self._exchange_paths and is_federated_token(token, self._federated_issuer):
            exchanged = await exchange_federated_token(
                self._post_unauthenticated,
                token,
                paths=self._exchange_paths,
            )
            if exchanged:
                to_store = exchanged
            else:
                logger.warning("Token exchange failed on every endpoint; keeping original token")
        self._token_store.set(to_store)
        self._new_session()

    def remove_token(self) -> None:
        # Cached responses may be specific to the principal that is leaving
        self._token_store.remove()
        self._new_session()

    def _new_session(self) -> None:
        self._session += 1
        self._cache.clear()

    async def logout(self) -> Any:
        try:
            return await self.request(LOGOUT_PATH, method="POST")
        finally:
            self.remove_token()

    def invalidate(self, pattern: Optional[str] = None) -> int:
        return self._cache.clear(pattern)

    # --- Requests ---

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        cache_ttl: Optional[float] = None,
        use_cache: bool = True,
        invalidate: Optional[Iterable[str]] = None,
    ) -> Any:
        """Send one logical request and return the parsed JSON body.

        Raises:
          ValidationError for a bad endpoint or method; ConnectivityError,
          AuthenticationError, BackendError or ParseError when the call fails.
        """
        req = ApiRequest(
            endpoint=normalize_endpoint(endpoint),
            method=normalize_method(method),
            body=body,
            headers=dict(headers or {}),
            cache_ttl=cache_ttl,
            use_cache=bool(use_cache),
            invalidate=normalize_patterns(invalidate),
        )

        # From here to track() there is no await: check-then-insert is atomic
        key = req.request_key
        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("Joining in-flight request %s %s", req.method, req.endpoint)
            return await asyncio.shield(pending)

        if req.cacheable:
            cached = self._cache.get(req.cache_key, _MISS)
            if cached is not _MISS:
                logger.debug("Cache hit for %s", req.endpoint)
                return cached

        task = asyncio.get_running_loop().create_task(self._perform(req, session=self._session))
        self._in_flight.track(key, task)
        return await asyncio.shield(task)

    async def _perform(self, req: ApiRequest, *, session: int) -> Any:
        public = is_public_endpoint(req.endpoint)
        logger.debug("Request %s %s", req.method, req.endpoint)

        try:
            resp = await asyncio.wait_for(
                self._send(req, public=public),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("Request %s %s timed out", req.method, req.endpoint)
            raise ConnectivityError(TIMEOUT_MESSAGE, timed_out=True, endpoint=req.endpoint) from e
        except httpx.HTTPError as e:
            logger.warning("Request %s %s failed: %s", req.method, req.endpoint, e)
            raise ConnectivityError(CONNECTIVITY_MESSAGE, endpoint=req.endpoint) from e

        logger.debug("Response %s %s: status %d", req.method, req.endpoint, resp.status_code)

        if resp.status_code == 401 and not public:
            err = authentication_error(resp, endpoint=req.endpoint)
            self._expire_session(req.endpoint)
            raise err

        if not resp.is_success:
            err = backend_error(resp, endpoint=req.endpoint)
            logger.info("%s %s failed with status %d", req.method, req.endpoint, resp.status_code)
            raise err

        data = parse_success(resp, endpoint=req.endpoint)

        if is_login_endpoint(req.endpoint) and isinstance(data, dict):
            access_token = data.get("access_token")
            if isinstance(access_token, str) and access_token:
                await self.set_token(access_token)

        if req.cacheable and session == self._session:
            ttl = self._cache_ttl if req.cache_ttl is None else float(req.cache_ttl)
            self._cache.set(req.cache_key, data, ttl)
        elif not req.is_get:
            for pattern in req.invalidate:
                self._cache.clear(pattern)

        return data

    def _expire_session(self, endpoint: str) -> None:
        logger.warning("Authentication failed for %s; clearing session", endpoint)
        self.remove_token()
        self._signals.emit(SessionExpired(endpoint=endpoint))

    # --- HTTP helpers ---

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Accept": self.JSON_ACCEPT},
            timeout=self._timeout,
            verify=self._verify,
        )

    def _client(self) -> httpx.AsyncClient:
        # One long-lived client so the cookie jar persists between calls
        if self._http is None:
            self._http = self._create_client()
        return self._http

    def _build_headers(self, req: ApiRequest, *, public: bool) -> dict[str, str]:
        headers = {"Accept": self.JSON_ACCEPT}
        if req.body is not None:
            headers["Content-Type"] = "application/json"

        token = None if public else self._token_store.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        headers.update(req.headers)
        return headers

    async def _send(self, req: ApiRequest, *, public: bool) -> httpx.Response:
        kwargs: dict[str, Any] = {"headers": self._build_headers(req, public=public)}
        if req.body is not None:
            kwargs["json"] = req.body
        return await self._client().request(req.method, req.endpoint, **kwargs)

    async def _post_unauthenticated(self, path: str, payload: Mapping[str, Any]) -> httpx.Response:
        return await asyncio.wait_for(
            self._client().post(
                path,
                json=dict(payload),
                headers={"Accept": self.JSON_ACCEPT, "Content-Type": "application/json"},
            ),
            timeout=self._timeout,
        )

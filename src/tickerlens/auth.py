"""Access token management for the upstream quote service.

A single ``asyncio.Task`` represents the in-flight refresh; every caller
that finds no usable token awaits that same task, so concurrent callers
share one upstream request and observe the same token or the same
``AuthFailure``.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Any, Callable

import httpx

from tickerlens.errors import AuthFailure
from tickerlens.models.token import AccessToken

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth2/tokenP"
TOKEN_SAFETY_MARGIN_SECONDS = 60.0
DEFAULT_TOKEN_TTL_SECONDS = 23 * 60 * 60


def _parse_ttl(value: Any) -> float:
    try:
        ttl = float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_TOKEN_TTL_SECONDS)
    if not math.isfinite(ttl) or ttl <= 0:
        return float(DEFAULT_TOKEN_TTL_SECONDS)
    return ttl


class TokenManager:
    """Acquire, cache and single-flight refresh a client-credentials token.

    Args:
        client: HTTP client bound to the upstream base URL.
        app_key: Application key.
        app_secret: Application secret.
        attempts: Token endpoint attempts per refresh.
        backoff_seconds: Fixed delay before each retry.
        timeout: Bound on each whole token request, in seconds; None disables it.
        clock: Monotonic clock in seconds.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        app_key: str,
        app_secret: str,
        *,
        attempts: int = 2,
        backoff_seconds: float = 0.4,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._app_key = app_key
        self._app_secret = app_secret
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds
        self.timeout = timeout
        self._clock = clock
        self._token: AccessToken | None = None
        self._inflight: asyncio.Task[AccessToken] | None = None

    @property
    def cached_token(self) -> AccessToken | None:
        return self._token

    async def get_token(self) -> AccessToken:
        """Return a token with at least 60 s of validity left."""
        token = self._token
        if token is not None and token.is_fresh(self._clock(), TOKEN_SAFETY_MARGIN_SECONDS):
            return token

        if self._inflight is None:
            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._refresh_done)
            self._inflight = task
        return await asyncio.shield(self._inflight)

    def invalidate(self, token: AccessToken | None = None) -> None:
        """Forget the cached token so the next caller refreshes.

        With ``token``, only that token is dropped; a newer cached token
        survives a late rejection of an older one.
        """
        if token is None or self._token is token:
            self._token = None

    def _refresh_done(self, task: asyncio.Task[AccessToken]) -> None:
        if self._inflight is task:
            self._inflight = None
        # Marks the failure as retrieved when every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def _refresh(self) -> AccessToken:
        last_error = "token request failed"
        for attempt in range(self.attempts):
            if attempt:
                await asyncio.sleep(self.backoff_seconds)
            try:
                response = await asyncio.wait_for(self._client.post(
                    TOKEN_PATH,
                    json={
                        "grant_type": "client_credentials",
                        "appkey": self._app_key,
                        "appsecret": self._app_secret,
                    },
                    headers={"content-type": "application/json; charset=utf-8"},
                ), self.timeout)
            except (httpx.TimeoutException, asyncio.TimeoutError):
                last_error = "token request timed out"
                logger.warning("Token attempt %d/%d timed out", attempt + 1, self.attempts)
                continue
            except httpx.HTTPError as exc:
                last_error = f"token request error: {exc}"
                logger.warning("Token attempt %d/%d failed: %s", attempt + 1, self.attempts, exc)
                continue

            if not response.is_success:
                last_error = f"token request failed: HTTP {response.status_code}"
                logger.warning(
                    "Token attempt %d/%d rejected with HTTP %d",
                    attempt + 1, self.attempts, response.status_code,
                )
                continue

            try:
                payload = response.json()
            except ValueError:
                payload = None
            access = payload.get("access_token") if isinstance(payload, dict) else None
            if not access:
                last_error = "token response missing access_token"
                logger.warning("Token attempt %d/%d: %s", attempt + 1, self.attempts, last_error)
                continue

            ttl = _parse_ttl(payload.get("expires_in"))
            token = AccessToken(token=str(access), expires_at=self._clock() + ttl)
            self._token = token
            logger.info("Obtained access token, valid for %.0fs", ttl)
            return token

        raise AuthFailure(last_error)

"""Enrichment pipeline configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from tickerlens.cache import FUNDAMENTALS_TTL_SECONDS, QUOTE_TTL_SECONDS

BASE_URL_REAL = "https://openapi.koreainvestment.com:9443"
BASE_URL_VTS = "https://openapivts.koreainvestment.com:29443"

_TRUTHY = {"1", "true", "yes", "on"}


class QuoteProviderType(Enum):
    """Supported upstream quote backends."""

    KIS = "kis"
    MOCK = "mock"


@dataclass
class EnrichmentConfig:
    """Configuration for EnrichmentManager.

    Attributes:
        provider: Upstream quote backend.
        app_key: Quote service application key.
        app_secret: Quote service application secret.
        base_url: Explicit upstream base URL; overrides ``use_vts``.
        use_vts: Use the paper-trading (VTS) host instead of the real one.
        quote_ttl_seconds: TTL for cached quotes.
        fundamentals_ttl_seconds: TTL for cached fundamentals.
        cache_enabled: Disable to bypass both caches.
        request_timeout_seconds: Per-request timeout.
        request_delay_seconds: Pacing delay before every upstream call.
        daily_lookback_days: Calendar days of daily bars to request.
        concurrency: Number of concurrent fetch workers.
        token_attempts: Token endpoint attempts before giving up.
        token_backoff_seconds: Delay before each token retry.
        universe_dir: Directory holding the reference universe files.
        max_candidates: Candidates kept after verification.
    """

    provider: QuoteProviderType = QuoteProviderType.KIS
    app_key: str | None = None
    app_secret: str | None = None
    base_url: str | None = None
    use_vts: bool = False

    quote_ttl_seconds: float = QUOTE_TTL_SECONDS
    fundamentals_ttl_seconds: float = FUNDAMENTALS_TTL_SECONDS
    cache_enabled: bool = True

    request_timeout_seconds: float = 12.0
    request_delay_seconds: float = 0.12
    daily_lookback_days: int = 60
    concurrency: int = 2

    token_attempts: int = 2
    token_backoff_seconds: float = 0.4

    universe_dir: str = "data/universe"
    max_candidates: int = 12

    @property
    def is_configured(self) -> bool:
        """Whether upstream credentials are present for the chosen provider."""
        if self.provider is QuoteProviderType.MOCK:
            return True
        return bool(self.app_key and self.app_secret)

    @property
    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return BASE_URL_VTS if self.use_vts else BASE_URL_REAL

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> EnrichmentConfig:
        """Build a config from environment variables.

        When ``env_file`` is given it is loaded first; variables already set
        in the process environment win.

        Environment variables:
            TICKERLENS_PROVIDER: "kis" or "mock" (default: "kis").
            KIS_APP_KEY: Quote service application key.
            KIS_APP_SECRET: Quote service application secret.
            KIS_BASE_URL: Explicit upstream base URL.
            KIS_USE_VTS: "true" to use the paper-trading host.
            TICKERLENS_UNIVERSE_DIR: Reference universe directory (default: "data/universe").
            TICKERLENS_CONCURRENCY: Concurrent fetch workers (default: 2).
            TICKERLENS_CACHE: "memory" or "none" (default: "memory").
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)

        return cls(
            provider=QuoteProviderType(os.getenv("TICKERLENS_PROVIDER", "kis").strip().lower()),
            app_key=os.getenv("KIS_APP_KEY") or None,
            app_secret=os.getenv("KIS_APP_SECRET") or None,
            base_url=os.getenv("KIS_BASE_URL") or None,
            use_vts=os.getenv("KIS_USE_VTS", "").strip().lower() in _TRUTHY,
            cache_enabled=os.getenv("TICKERLENS_CACHE", "memory").strip().lower() != "none",
            concurrency=int(os.getenv("TICKERLENS_CONCURRENCY", "2")),
            universe_dir=os.getenv("TICKERLENS_UNIVERSE_DIR", "data/universe"),
        )

"""Korea Investment & Securities (KIS) Open API provider.

Covers domestic spot quotes, financial ratios and daily bars, and overseas
spot quotes per exchange. Every call is paced by a fixed delay, bounded by
a total request timeout and authenticated with a bearer token from
``TokenManager``; a 401 invalidates the token and retries once.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
import ssl
import time
from datetime import date
from typing import Any, Callable

import certifi
import httpx

from tickerlens.auth import TokenManager
from tickerlens.config import BASE_URL_REAL
from tickerlens.errors import (
    AuthFailure,
    EnrichmentError,
    EnrichmentErrorCode,
    TimeoutFailure,
    UpstreamRequestFailure,
)
from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import Fundamentals, Quote
from tickerlens.models.token import AccessToken
from tickerlens.providers.base import BaseQuoteProvider

logger = logging.getLogger(__name__)

DOMESTIC_PRICE_PATH = "/uapi/domestic-stock/v1/quotations/inquire-price"
DOMESTIC_RATIO_PATH = "/uapi/domestic-stock/v1/finance/financial-ratio"
DOMESTIC_DAILY_PATH = "/uapi/domestic-stock/v1/quotations/inquire-daily-itemchartprice"
OVERSEAS_PRICE_PATH = "/uapi/overseas-price/v1/quotations/price"

TR_DOMESTIC_PRICE = "FHKST01010100"
TR_DOMESTIC_RATIO = "FHKST66430300"
TR_DOMESTIC_DAILY = "FHKST03010100"
TR_OVERSEAS_PRICE = "HHDFS00000300"


def parse_number(value: Any) -> float | None:
    """Parse an upstream numeric string such as ``"1,234.5"``."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class KisProvider(BaseQuoteProvider):
    """Fetch quotes, fundamentals and daily bars from the KIS Open API.

    Args:
        app_key: Application key (default: ``KIS_APP_KEY``).
        app_secret: Application secret (default: ``KIS_APP_SECRET``).
        base_url: Upstream host.
        timeout: Bound on each whole request (token or data), in seconds.
        request_delay: Pacing delay before each call, in seconds.
        token_attempts: Token endpoint attempts per refresh.
        token_backoff: Delay before a token retry, in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        clock: Monotonic clock used for token expiry.
    """

    def __init__(
        self,
        app_key: str | None = None,
        app_secret: str | None = None,
        base_url: str = BASE_URL_REAL,
        timeout: float = 12.0,
        request_delay: float = 0.12,
        token_attempts: int = 2,
        token_backoff: float = 0.4,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.app_key = app_key or os.getenv("KIS_APP_KEY")
        self.app_secret = app_secret or os.getenv("KIS_APP_SECRET")
        if not (self.app_key and self.app_secret):
            raise EnrichmentError(
                "KIS app key and secret required. Set KIS_APP_KEY/KIS_APP_SECRET or pass them.",
                code=EnrichmentErrorCode.NOT_CONFIGURED,
            )

        self.request_delay = request_delay
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            verify=ssl.create_default_context(cafile=certifi.where()),
            transport=transport,
        )
        self.tokens = TokenManager(
            self.client,
            self.app_key,
            self.app_secret,
            attempts=token_attempts,
            backoff_seconds=token_backoff,
            timeout=timeout,
            clock=clock,
        )

    async def close(self) -> None:
        await self.client.aclose()

    # ------------------------------------------------------------ domestic

    async def get_domestic_quote(self, ticker: str) -> Quote:
        payload = await self._get(
            DOMESTIC_PRICE_PATH,
            TR_DOMESTIC_PRICE,
            {"FID_COND_MRKT_DIV_CODE": "J", "FID_INPUT_ISCD": ticker},
        )
        self._require_ok(payload, "Domestic quote failed")
        output = _as_dict(payload.get("output"))
        return Quote(
            ticker=ticker,
            price=parse_number(output.get("stck_prpr")),
            change_percent=parse_number(output.get("prdy_ctrt")),
            volume=parse_number(output.get("acml_vol")),
        )

    async def get_domestic_fundamentals(self, ticker: str) -> Fundamentals | None:
        payload = await self._get(
            DOMESTIC_RATIO_PATH,
            TR_DOMESTIC_RATIO,
            {
                "FID_DIV_CLS_CODE": "1",
                "fid_cond_mrkt_div_code": "J",
                "fid_input_iscd": ticker,
            },
        )
        self._require_ok(payload, "Financial ratio request failed")
        rows = payload.get("output")
        if not isinstance(rows, list) or not rows:
            return None
        first = _as_dict(rows[0])
        return Fundamentals(
            roe=parse_number(first.get("roe_val")),
            eps=parse_number(first.get("eps")),
            bps=parse_number(first.get("bps")),
        )

    async def get_domestic_daily_bars(
        self, ticker: str, start: date, end: date,
    ) -> list[DailyBar]:
        payload = await self._get(
            DOMESTIC_DAILY_PATH,
            TR_DOMESTIC_DAILY,
            {
                "FID_COND_MRKT_DIV_CODE": "J",
                "FID_INPUT_ISCD": ticker,
                "FID_INPUT_DATE_1": format_date(start),
                "FID_INPUT_DATE_2": format_date(end),
                "FID_PERIOD_DIV_CODE": "D",
                "FID_ORG_ADJ_PRC": "0",
            },
        )
        self._require_ok(payload, "Daily chart request failed")
        rows = payload.get("output2")
        if not isinstance(rows, list):
            return []

        bars: list[DailyBar] = []
        for raw in rows:
            row = _as_dict(raw)
            bars.append(DailyBar(
                date=str(row.get("stck_bsop_date") or "").strip(),
                open=parse_number(row.get("stck_oprc")) or 0.0,
                high=parse_number(row.get("stck_hgpr")) or 0.0,
                low=parse_number(row.get("stck_lwpr")) or 0.0,
                close=parse_number(row.get("stck_clpr")) or 0.0,
                volume=int(parse_number(row.get("acml_vol")) or 0),
            ))
        return bars

    # ------------------------------------------------------------- foreign

    async def get_foreign_quote(self, ticker: str, exchange: str) -> Quote | None:
        payload = await self._get(
            OVERSEAS_PRICE_PATH,
            TR_OVERSEAS_PRICE,
            {"AUTH": "", "EXCD": exchange, "SYMB": ticker},
        )
        if payload.get("rt_cd") != "0":
            logger.debug("%s not quoted on %s: %s", ticker, exchange, payload.get("msg1"))
            return None

        output = _as_dict(payload.get("output"))
        price = parse_number(output.get("last"))
        if not price or price <= 0:
            return None
        return Quote(
            ticker=ticker,
            price=price,
            change_percent=parse_number(output.get("rate")),
            volume=parse_number(output.get("tvol")),
        )

    # ----------------------------------------------------------- internals

    def _headers(self, token: AccessToken, tr_id: str) -> dict[str, str]:
        return {
            "content-type": "application/json; charset=utf-8",
            "authorization": f"Bearer {token.token}",
            "appkey": self.app_key or "",
            "appsecret": self.app_secret or "",
            "tr_id": tr_id,
            "custtype": "P",
        }

    async def _get(
        self,
        path: str,
        tr_id: str,
        params: dict[str, str],
        *,
        retry_on_unauthorized: bool = True,
    ) -> dict[str, Any]:
        if self.request_delay > 0:
            await asyncio.sleep(self.request_delay)
        token = await self.tokens.get_token()

        try:
            resp = await asyncio.wait_for(
                self.client.get(path, params=params, headers=self._headers(token, tr_id)),
                self.timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise TimeoutFailure(f"{tr_id} request timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamRequestFailure(f"{tr_id} request error: {exc}", retryable=True) from exc

        if resp.status_code == 401:
            self.tokens.invalidate(token)
            if retry_on_unauthorized:
                logger.info("Token rejected on %s; refreshing and retrying once", tr_id)
                return await self._get(path, tr_id, params, retry_on_unauthorized=False)
            raise AuthFailure(f"{tr_id} unauthorized after token refresh")

        return self._check_response(resp, tr_id)

    def _check_response(self, resp: httpx.Response, tr_id: str) -> dict[str, Any]:
        if resp.status_code == 429:
            raise UpstreamRequestFailure(
                "KIS rate limited",
                code=EnrichmentErrorCode.RATE_LIMITED,
                retryable=True,
            )

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if not resp.is_success:
            message = payload.get("msg1") if isinstance(payload, dict) else None
            raise UpstreamRequestFailure(
                message or f"{tr_id} failed: HTTP {resp.status_code}",
                retryable=resp.status_code >= 500,
            )
        if not isinstance(payload, dict):
            raise UpstreamRequestFailure(f"{tr_id} returned a malformed payload")
        return payload

    @staticmethod
    def _require_ok(payload: dict[str, Any], default_message: str) -> None:
        if payload.get("rt_cd") != "0":
            raise UpstreamRequestFailure(str(payload.get("msg1") or default_message))

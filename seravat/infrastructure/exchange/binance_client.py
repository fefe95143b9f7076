"""
Adapter: Binance spot REST API.

Implements ExchangeClientPort over httpx.
Each call opens its own AsyncClient and runs under an overall deadline,
so cancelling the awaiting task closes the connection. No retries.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from seravat.domain.exchange.entities import (
    AccountInfo,
    AccountResponse,
    AssetBalance,
    ExchangeErrorPayload,
    MalformedResponse,
    PriceQuote,
    SignedQuery,
)
from seravat.domain.exchange.errors import ConnectivityError, ExchangeTimeoutError
from seravat.domain.exchange.ports import ExchangeClientPort

logger = logging.getLogger(__name__)

SERVER_TIME_PATH = "/api/v3/time"
ACCOUNT_PATH = "/api/v3/account"
TICKER_PRICE_PATH = "/api/v3/ticker/price"
API_KEY_HEADER = "X-MBX-APIKEY"

DEFAULT_BASE_URL = "https://api.binance.com"
DEFAULT_USER_AGENT = "Seravat-Trading-Bot/1.0"


# Quantities and prices of 10**37 or more are treated as unparseable.
MAX_MAGNITUDE_EXPONENT = 36


def _is_usable(value: Decimal) -> bool:
    return value.is_finite() and value.adjusted() <= MAX_MAGNITUDE_EXPONENT


def _to_decimal(value: Any) -> Decimal:
    """Parse an exchange quantity; unparseable or out-of-range values count as zero."""
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    return parsed if _is_usable(parsed) else Decimal("0")


def _parse_balances(raw: Any) -> Optional[tuple[AssetBalance, ...]]:
    if not isinstance(raw, list):
        return None
    balances = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("asset"):
            continue
        balances.append(
            AssetBalance(
                asset=str(item["asset"]),
                free=_to_decimal(item.get("free")),
                locked=_to_decimal(item.get("locked")),
            )
        )
    return tuple(balances)


def parse_account_response(status_code: int, body: Any) -> AccountResponse:
    """Narrow a decoded account response body into the response union.

    Args:
        status_code: HTTP status of the response.
        body: Decoded JSON body.

    Returns:
        AccountInfo for a 2xx body carrying account data,
        ExchangeErrorPayload for a body carrying an error code,
        MalformedResponse otherwise.
    """
    if not isinstance(body, dict):
        return MalformedResponse(status_code, "response body is not a JSON object")

    ok = 200 <= status_code < 300
    if ok and ("accountType" in body or "balances" in body):
        account_type = body.get("accountType")
        if account_type is not None and not isinstance(account_type, str):
            return MalformedResponse(status_code, "accountType is not a string")
        permissions = body.get("permissions") or []
        return AccountInfo(
            account_type=account_type,
            permissions=tuple(str(p) for p in permissions) if isinstance(permissions, list) else (),
            can_trade=bool(body.get("canTrade", False)),
            balances=_parse_balances(body.get("balances")),
        )

    code = body.get("code")
    if isinstance(code, int) and not isinstance(code, bool):
        return ExchangeErrorPayload(
            code=code, message=str(body.get("msg") or ""), http_status=status_code
        )

    return MalformedResponse(status_code, f"unexpected body (HTTP {status_code})")


def parse_ticker_prices(body: Any) -> list[PriceQuote]:
    """Turn a ticker/price body into quotes, skipping unusable entries."""
    if not isinstance(body, list):
        raise ConnectivityError("price ticker body is not a list")
    quotes = []
    for item in body:
        if not isinstance(item, dict):
            continue
        symbol = item.get("symbol")
        price = item.get("price")
        if not symbol or price in (None, ""):
            continue
        try:
            value = Decimal(str(price))
        except InvalidOperation:
            continue
        if _is_usable(value):
            quotes.append(PriceQuote(symbol=str(symbol), price=value))
    return quotes


class BinanceSpotClient(ExchangeClientPort):
    """Concrete adapter for the Binance spot REST API.

    Implements the ExchangeClientPort defined in the domain layer.
    Holds configuration only; no connection outlives a call.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        probe_timeout: float = 10.0,
        signed_call_timeout: float = 15.0,
        ticker_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the REST API.
            user_agent: User-Agent header value.
            probe_timeout: Default deadline of the server-time probe, in seconds.
            signed_call_timeout: Deadline of signed calls, in seconds.
            ticker_timeout: Deadline of the price-ticker call, in seconds.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._probe_timeout = probe_timeout
        self._signed_call_timeout = signed_call_timeout
        self._ticker_timeout = ticker_timeout
        self._transport = transport

    async def _get(
        self,
        operation: str,
        url: str,
        timeout: float,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        request_headers = {"User-Agent": self._user_agent, "Content-Type": "application/json"}
        request_headers.update(headers or {})

        async def send() -> httpx.Response:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(timeout),
                transport=self._transport,
            ) as client:
                return await client.get(url, headers=request_headers)

        try:
            return await asyncio.wait_for(send(), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Exchange %s exceeded %.1fs deadline", operation, timeout)
            raise ExchangeTimeoutError(operation, timeout) from exc
        except httpx.HTTPError as exc:
            logger.warning("Exchange %s failed: %s", operation, type(exc).__name__)
            raise ConnectivityError(f"{operation} request failed: {type(exc).__name__}") from exc

    async def probe(self, timeout: Optional[float] = None) -> None:
        """Check reachability via the public server-time endpoint."""
        deadline = timeout if timeout is not None else self._probe_timeout
        response = await self._get("server time check", SERVER_TIME_PATH, deadline)
        if not response.is_success:
            logger.error("Server time check failed: HTTP %d", response.status_code)
            raise ConnectivityError(
                f"server time check returned HTTP {response.status_code}"
            )

    async def get_account(self, signed: SignedQuery) -> AccountResponse:
        """Call the signed account endpoint and parse the response."""
        url = f"{ACCOUNT_PATH}?{signed.query}&signature={signed.signature}"
        response = await self._get(
            "account request",
            url,
            self._signed_call_timeout,
            headers={API_KEY_HEADER: signed.api_key},
        )
        logger.info("Account request answered HTTP %d", response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise ConnectivityError(
                f"account response is not JSON (HTTP {response.status_code})"
            ) from exc
        return parse_account_response(response.status_code, body)

    async def get_ticker_prices(self) -> list[PriceQuote]:
        """Fetch the last price of every tradable pair."""
        response = await self._get("price ticker", TICKER_PRICE_PATH, self._ticker_timeout)
        if not response.is_success:
            raise ConnectivityError(f"price ticker returned HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError as exc:
            raise ConnectivityError("price ticker response is not JSON") from exc
        return parse_ticker_prices(body)

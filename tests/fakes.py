"""
Test doubles shared across the test modules.

No network, no database.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from seravat.domain.exchange.entities import (
    AccountInfo,
    AccountResponse,
    AssetBalance,
    CredentialPair,
    PriceQuote,
    SignedQuery,
)
from seravat.domain.exchange.ports import (
    CredentialStore,
    ExchangeClientPort,
    PortfolioStore,
)

# Example credentials from the exchange's public API documentation.
API_KEY = "vmPUZE6mv9SD5VNHk4HlWFsOr6aKE2zvsw0MuIgwCIPy6utIco14y7Ju91duEh8A"
SECRET_KEY = "NhqPtmdSJYdKjVHjA7PZj4Mge3R5YNiP1e3UZjInClVN65XAbvqqM6A7H5fATj0j"

FIXED_TIMESTAMP_MS = 1_700_000_000_000


def fixed_clock() -> int:
    return FIXED_TIMESTAMP_MS


def balance(asset: str, free: str, locked: str = "0") -> AssetBalance:
    return AssetBalance(asset=asset, free=Decimal(free), locked=Decimal(locked))


def account(
    balances: Optional[list[AssetBalance]] = None,
    account_type: Optional[str] = "SPOT",
    permissions: tuple[str, ...] = ("SPOT",),
    can_trade: bool = True,
) -> AccountInfo:
    return AccountInfo(
        account_type=account_type,
        permissions=permissions,
        can_trade=can_trade,
        balances=tuple(balances) if balances is not None else None,
    )


class FakeExchangeClient(ExchangeClientPort):
    """Scriptable exchange client that counts every call."""

    def __init__(
        self,
        account_response: Optional[AccountResponse] = None,
        quotes: Optional[list[PriceQuote]] = None,
        probe_error: Optional[Exception] = None,
        account_error: Optional[Exception] = None,
        ticker_error: Optional[Exception] = None,
    ) -> None:
        self.account_response = account_response if account_response is not None else account([])
        self.quotes = quotes or []
        self.probe_error = probe_error
        self.account_error = account_error
        self.ticker_error = ticker_error
        self.probe_calls = 0
        self.account_calls: list[SignedQuery] = []
        self.ticker_calls = 0

    @property
    def total_calls(self) -> int:
        return self.probe_calls + len(self.account_calls) + self.ticker_calls

    async def probe(self, timeout: Optional[float] = None) -> None:
        self.probe_calls += 1
        if self.probe_error is not None:
            raise self.probe_error

    async def get_account(self, signed: SignedQuery) -> AccountResponse:
        self.account_calls.append(signed)
        if self.account_error is not None:
            raise self.account_error
        return self.account_response

    async def get_ticker_prices(self) -> list[PriceQuote]:
        self.ticker_calls += 1
        if self.ticker_error is not None:
            raise self.ticker_error
        return list(self.quotes)


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, pairs: Optional[dict[str, CredentialPair]] = None) -> None:
        self.pairs = dict(pairs or {})

    def get_active(self, user_id: str) -> Optional[CredentialPair]:
        return self.pairs.get(user_id)

    def save(self, user_id: str, pair: CredentialPair) -> None:
        self.pairs[user_id] = pair


class InMemoryPortfolioStore(PortfolioStore):
    def __init__(self) -> None:
        self.snapshots: dict[str, tuple[Decimal, datetime]] = {}

    def upsert_snapshot(self, user_id: str, total_balance: Decimal, as_of: datetime) -> None:
        self.snapshots[user_id] = (total_balance, as_of)

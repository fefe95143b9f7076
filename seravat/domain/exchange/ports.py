"""
Port interfaces (ABCs) for the exchange bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from seravat.domain.exchange.entities import (
    AccountResponse,
    CredentialPair,
    PriceQuote,
    SignedQuery,
)


class ExchangeClientPort(ABC):
    """Port for the spot exchange REST API.

    Every call carries its own deadline. Implementations never retry.
    """

    @abstractmethod
    async def probe(self, timeout: Optional[float] = None) -> None:
        """Check that the exchange answers its public server-time endpoint.

        Args:
            timeout: Deadline in seconds; the adapter default when None.

        Raises:
            ConnectivityError: On a non-2xx status or a transport failure.
            ExchangeTimeoutError: If the deadline elapses first.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_account(self, signed: SignedQuery) -> AccountResponse:
        """Call the signed account-information endpoint.

        Returns:
            AccountInfo, ExchangeErrorPayload or MalformedResponse.

        Raises:
            ConnectivityError: On a transport failure or an unparseable body.
            ExchangeTimeoutError: If the deadline elapses first.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_ticker_prices(self) -> list[PriceQuote]:
        """Return the last price of every tradable pair.

        Raises:
            ConnectivityError: On a non-2xx status, transport failure or bad body.
            ExchangeTimeoutError: If the deadline elapses first.
        """
        raise NotImplementedError


class CredentialStore(ABC):
    """Port for stored exchange credentials."""

    @abstractmethod
    def get_active(self, user_id: str) -> Optional[CredentialPair]:
        """Return the user's active credential pair, or None."""
        raise NotImplementedError

    @abstractmethod
    def save(self, user_id: str, pair: CredentialPair) -> None:
        """Persist a validated pair as the user's active credentials."""
        raise NotImplementedError


class PortfolioStore(ABC):
    """Port for the latest portfolio valuation per user."""

    @abstractmethod
    def upsert_snapshot(
        self, user_id: str, total_balance: Decimal, as_of: datetime
    ) -> None:
        """Insert or replace the user's latest valuation."""
        raise NotImplementedError

"""
Dependency injection for the exchange bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the exchange context.
Use cases are built per request; only the database engine is shared.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from seravat.application.exchange.aggregate_balance import AggregateBalanceUseCase
from seravat.application.exchange.connect_account import ConnectExchangeAccountUseCase
from seravat.application.exchange.fetch_balance import FetchBalanceUseCase
from seravat.application.exchange.validate_credentials import ValidateCredentialsUseCase
from seravat.core.config import settings
from seravat.domain.exchange.valuation import BalanceValuationService
from seravat.infrastructure.exchange.binance_client import BinanceSpotClient
from seravat.infrastructure.exchange.credential_repository import (
    CredentialRepositoryAdapter,
)
from seravat.infrastructure.exchange.portfolio_repository import (
    PortfolioRepositoryAdapter,
)


@lru_cache(maxsize=1)
def get_db_engine() -> Engine:
    """Build the SQLAlchemy engine from application settings."""
    return create_engine(settings.database_url, pool_pre_ping=True)


def _exchange_client() -> BinanceSpotClient:
    return BinanceSpotClient(
        base_url=settings.exchange_base_url,
        user_agent=settings.exchange_user_agent,
        probe_timeout=settings.probe_timeout_seconds,
        signed_call_timeout=settings.signed_call_timeout_seconds,
        ticker_timeout=settings.ticker_timeout_seconds,
    )


def _aggregator() -> AggregateBalanceUseCase:
    return AggregateBalanceUseCase(
        exchange_client=_exchange_client(),
        valuation_service=BalanceValuationService(
            valuation_currency=settings.valuation_currency,
            bridge_asset=settings.bridge_asset,
            dust_threshold=settings.dust_threshold,
        ),
    )


def get_validate_credentials_use_case() -> ValidateCredentialsUseCase:
    """Build ValidateCredentialsUseCase with its infrastructure dependencies."""
    return ValidateCredentialsUseCase(exchange_client=_exchange_client())


def get_fetch_balance_use_case() -> FetchBalanceUseCase:
    """Build FetchBalanceUseCase with its infrastructure dependencies."""
    engine = get_db_engine()
    return FetchBalanceUseCase(
        credential_store=CredentialRepositoryAdapter(engine=engine),
        portfolio_store=PortfolioRepositoryAdapter(engine=engine),
        aggregator=_aggregator(),
    )


def get_connect_account_use_case() -> ConnectExchangeAccountUseCase:
    """Build ConnectExchangeAccountUseCase with its infrastructure dependencies."""
    engine = get_db_engine()
    return ConnectExchangeAccountUseCase(
        validator=get_validate_credentials_use_case(),
        aggregator=_aggregator(),
        credential_store=CredentialRepositoryAdapter(engine=engine),
        portfolio_store=PortfolioRepositoryAdapter(engine=engine),
    )

"""
Use case: Connect an exchange account to a user.

Input: ConnectAccountCommand (user_id, api_key, secret_key)
Output: ConnectAccountResult
Side effects: Persists validated credentials; records the initial valuation.
Failure cases: none raised for invalid credentials (returned as a
ValidationResult); store failures propagate.

The initial balance read is best effort: once the credentials are
stored the connection stands even if that read fails.
"""

import asyncio
import logging
from datetime import datetime, timezone

from seravat.application.exchange.aggregate_balance import AggregateBalanceUseCase
from seravat.application.exchange.dtos import (
    ConnectAccountCommand,
    ConnectAccountResult,
    ValidateCredentialsCommand,
)
from seravat.application.exchange.validate_credentials import ValidateCredentialsUseCase
from seravat.domain.exchange.entities import CredentialPair
from seravat.domain.exchange.errors import ExchangeDomainError
from seravat.domain.exchange.ports import CredentialStore, PortfolioStore

logger = logging.getLogger(__name__)


class ConnectExchangeAccountUseCase:
    """Validates, stores and performs the first valuation of a credential pair."""

    def __init__(
        self,
        validator: ValidateCredentialsUseCase,
        aggregator: AggregateBalanceUseCase,
        credential_store: CredentialStore,
        portfolio_store: PortfolioStore,
    ) -> None:
        self._validator = validator
        self._aggregator = aggregator
        self._credentials = credential_store
        self._portfolio = portfolio_store

    async def execute(self, command: ConnectAccountCommand) -> ConnectAccountResult:
        """Run the account connection use case."""
        validation = await self._validator.execute(
            ValidateCredentialsCommand(api_key=command.api_key, secret_key=command.secret_key)
        )
        if not validation.valid:
            return ConnectAccountResult(validation=validation)

        pair = CredentialPair(api_key=command.api_key, secret_key=command.secret_key)
        await asyncio.to_thread(self._credentials.save, command.user_id, pair)
        logger.info("Stored credentials for user=%s api_key=%s", command.user_id, pair.masked_api_key)

        try:
            valuation = await self._aggregator.execute(pair)
        except ExchangeDomainError as exc:
            logger.warning("Initial balance unavailable for user=%s: %s", command.user_id, exc.message)
            return ConnectAccountResult(validation=validation)

        await asyncio.to_thread(
            self._portfolio.upsert_snapshot,
            command.user_id,
            valuation.total_valuation,
            datetime.now(timezone.utc),
        )
        return ConnectAccountResult(validation=validation, valuation=valuation)

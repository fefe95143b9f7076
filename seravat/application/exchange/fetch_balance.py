"""
Use case: Fetch and record the valuation of a user's exchange account.

Input: FetchBalanceQuery (user_id)
Output: ValuationResult
Side effects: Upserts the latest valuation into the portfolio store.
Store calls are blocking and run in a worker thread.
Failure cases: CredentialsNotFoundError, plus every failure of
AggregateBalanceUseCase.
"""

import asyncio
import logging
from datetime import datetime, timezone

from seravat.application.exchange.aggregate_balance import AggregateBalanceUseCase
from seravat.application.exchange.dtos import FetchBalanceQuery
from seravat.domain.exchange.entities import ValuationResult
from seravat.domain.exchange.errors import CredentialsNotFoundError
from seravat.domain.exchange.ports import CredentialStore, PortfolioStore

logger = logging.getLogger(__name__)


class FetchBalanceUseCase:
    """Resolves stored credentials, values the account and records it."""

    def __init__(
        self,
        credential_store: CredentialStore,
        portfolio_store: PortfolioStore,
        aggregator: AggregateBalanceUseCase,
    ) -> None:
        self._credentials = credential_store
        self._portfolio = portfolio_store
        self._aggregator = aggregator

    async def execute(self, query: FetchBalanceQuery) -> ValuationResult:
        """Run the balance fetch use case.

        Raises:
            CredentialsNotFoundError: If the user has no active credentials.
        """
        pair = await asyncio.to_thread(self._credentials.get_active, query.user_id)
        if pair is None:
            raise CredentialsNotFoundError(query.user_id)

        logger.info("Fetching balance for user=%s", query.user_id)
        result = await self._aggregator.execute(pair)

        await asyncio.to_thread(
            self._portfolio.upsert_snapshot,
            query.user_id,
            result.total_valuation,
            datetime.now(timezone.utc),
        )
        return result

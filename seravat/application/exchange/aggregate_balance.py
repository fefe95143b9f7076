"""
Use case: Value an exchange account from its balance snapshot.

Input: CredentialPair (already resolved by the caller)
Output: ValuationResult
Side effects: None.
Failure cases: FormatError, ConnectivityError, ExchangeTimeoutError,
SignatureError, ExchangeApiError, MalformedResponseError.

The price-ticker call is the only non-fatal step: when it fails the
valuation proceeds with an empty price table, so holdings already in
the valuation currency are still counted.
"""

import logging

from seravat.application.exchange.clock import Clock, now_ms
from seravat.domain.exchange.credential_rules import check_credential_format
from seravat.domain.exchange.entities import (
    AccountInfo,
    CredentialPair,
    ExchangeErrorPayload,
    PriceQuote,
    PriceTable,
    ValuationResult,
)
from seravat.domain.exchange.error_classifier import classify
from seravat.domain.exchange.errors import (
    ExchangeApiError,
    ExchangeDomainError,
    MalformedResponseError,
)
from seravat.domain.exchange.ports import ExchangeClientPort
from seravat.domain.exchange.signing import sign_query
from seravat.domain.exchange.valuation import BalanceValuationService

logger = logging.getLogger(__name__)


class AggregateBalanceUseCase:
    """Orchestrates probe -> signed snapshot -> prices -> valuation."""

    def __init__(
        self,
        exchange_client: ExchangeClientPort,
        valuation_service: BalanceValuationService,
        clock: Clock = now_ms,
    ) -> None:
        self._client = exchange_client
        self._valuation = valuation_service
        self._clock = clock

    async def execute(self, pair: CredentialPair) -> ValuationResult:
        """Run the balance aggregation use case.

        Args:
            pair: Credentials of the account to value.

        Returns:
            The account valuation.

        Raises:
            FormatError: If the stored credentials are malformed.
            ConnectivityError: If the probe or snapshot call fails.
            ExchangeTimeoutError: If the probe or snapshot call times out.
            ExchangeApiError: If the exchange rejects the snapshot call.
            MalformedResponseError: If the snapshot carries no balances.
        """
        check_credential_format(pair)

        logger.info("Aggregating balance for api_key=%s", pair.masked_api_key)
        await self._client.probe()

        signed = sign_query(pair, self._clock())
        response = await self._client.get_account(signed)

        if isinstance(response, ExchangeErrorPayload):
            classified = classify(response.code, response.message)
            logger.warning(
                "Exchange rejected snapshot for api_key=%s: code=%s category=%s",
                pair.masked_api_key,
                response.code,
                classified.category.value,
            )
            raise ExchangeApiError(classified)
        if not isinstance(response, AccountInfo):
            raise MalformedResponseError(response.reason)
        if response.balances is None:
            raise MalformedResponseError("account response contains no balances")

        prices = PriceTable.from_quotes(await self._fetch_prices())

        result = self._valuation.value(
            response.balances, prices, account_type=response.account_type
        )
        logger.info(
            "Valued %d of %d assets for api_key=%s: %s %s",
            result.meta.convertible_count,
            result.meta.asset_count,
            pair.masked_api_key,
            result.total_valuation,
            result.valuation_currency,
        )
        if result.meta.unpriced_assets:
            logger.info("No conversion path for: %s", ", ".join(result.meta.unpriced_assets))
        return result

    async def _fetch_prices(self) -> list[PriceQuote]:
        try:
            return await self._client.get_ticker_prices()
        except ExchangeDomainError as exc:
            logger.warning("Price ticker unavailable, valuing without prices: %s", exc.message)
            return []

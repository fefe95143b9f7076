"""
Use case: Validate a pair of exchange credentials.

Input: ValidateCredentialsCommand (api_key, secret_key)
Output: ValidationResult
Side effects: None. Credentials are never persisted here.
Failure cases: none raised; every domain failure becomes a
ValidationResult with valid=False.

Steps: format check -> connectivity probe -> signed account call ->
interpretation -> classification of any exchange error.
Malformed credentials never reach the network.
"""

import logging

from seravat.application.exchange.clock import Clock, now_ms
from seravat.application.exchange.dtos import ValidateCredentialsCommand
from seravat.domain.exchange.credential_rules import check_credential_format
from seravat.domain.exchange.entities import (
    AccountInfo,
    CredentialPair,
    ErrorCategory,
    ExchangeErrorPayload,
    ValidationResult,
)
from seravat.domain.exchange.error_classifier import classify
from seravat.domain.exchange.errors import (
    ConnectivityError,
    ExchangeDomainError,
    ExchangeTimeoutError,
    FormatError,
    SignatureError,
)
from seravat.domain.exchange.ports import ExchangeClientPort
from seravat.domain.exchange.signing import sign_query

logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Could not reach the exchange"
CONNECTIVITY_HELP = "The exchange servers did not answer. Check your connection and try again."
TIMEOUT_MESSAGE = "Exchange request timed out"
TIMEOUT_HELP = "The exchange took too long to respond. Try again."
SIGNATURE_MESSAGE = "Could not sign the request"
SIGNATURE_HELP = "The Secret Key may be incorrect or malformed."
MALFORMED_MESSAGE = "Invalid credentials"


class ValidateCredentialsUseCase:
    """Orchestrates a read-only check of a credential pair.

    Delegates network access to the ExchangeClientPort and error
    translation to the error classifier.
    """

    def __init__(self, exchange_client: ExchangeClientPort, clock: Clock = now_ms) -> None:
        self._client = exchange_client
        self._clock = clock

    async def execute(self, command: ValidateCredentialsCommand) -> ValidationResult:
        """Run the credential validation use case.

        Args:
            command: The credential pair to check.

        Returns:
            The validation verdict.
        """
        pair = CredentialPair(api_key=command.api_key, secret_key=command.secret_key)

        try:
            check_credential_format(pair)
        except FormatError as exc:
            logger.info("Credential format rejected: %s", exc.reason)
            return ValidationResult.failure(
                ErrorCategory.FORMAT_ERROR, exc.message, help=exc.reason
            )

        logger.info("Validating credentials for api_key=%s", pair.masked_api_key)

        try:
            return await self._check_with_exchange(pair)
        except ExchangeTimeoutError as exc:
            logger.warning("Credential validation timed out: %s", exc.message)
            return ValidationResult.failure(ErrorCategory.TIMEOUT, TIMEOUT_MESSAGE, help=TIMEOUT_HELP)
        except ConnectivityError as exc:
            logger.warning("Credential validation could not reach exchange: %s", exc.reason)
            return ValidationResult.failure(
                ErrorCategory.CONNECTIVITY_ERROR, CONNECTIVITY_MESSAGE, help=CONNECTIVITY_HELP
            )
        except SignatureError as exc:
            logger.error("Signing failed for api_key=%s: %s", pair.masked_api_key, exc.reason)
            return ValidationResult.failure(
                ErrorCategory.SIGNATURE_ERROR, SIGNATURE_MESSAGE, help=SIGNATURE_HELP
            )
        except ExchangeDomainError as exc:
            logger.error("Credential validation failed: %s", exc.message)
            return ValidationResult.failure(exc.category, exc.message)

    async def _check_with_exchange(self, pair: CredentialPair) -> ValidationResult:
        await self._client.probe()

        signed = sign_query(pair, self._clock())
        response = await self._client.get_account(signed)

        if isinstance(response, AccountInfo) and response.account_type:
            logger.info(
                "Credentials valid for api_key=%s (account_type=%s, can_trade=%s)",
                pair.masked_api_key,
                response.account_type,
                response.can_trade,
            )
            return ValidationResult.success(
                account_type=response.account_type,
                permissions=response.permissions,
                can_trade=response.can_trade,
            )

        if isinstance(response, ExchangeErrorPayload):
            classified = classify(response.code, response.message)
            logger.warning(
                "Exchange rejected api_key=%s: code=%s category=%s",
                pair.masked_api_key,
                response.code,
                classified.category.value,
            )
            return ValidationResult.failure(
                classified.category,
                classified.title,
                help=classified.remediation,
                code=classified.raw_code,
            )

        logger.warning("Account response without accountType for api_key=%s", pair.masked_api_key)
        return ValidationResult.failure(ErrorCategory.MALFORMED_RESPONSE, MALFORMED_MESSAGE)

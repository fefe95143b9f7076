"""
Domain-specific errors for the exchange bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from seravat.domain.exchange.entities import ClassifiedError, ErrorCategory


class ExchangeDomainError(Exception):
    """Base error for all exchange domain errors."""

    category = ErrorCategory.UNKNOWN

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class FormatError(ExchangeDomainError):
    """Raised when a credential fails the local format check.

    Never reaches the exchange.
    """

    category = ErrorCategory.FORMAT_ERROR

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field} format")
        self.field = field
        self.reason = reason


class ConnectivityError(ExchangeDomainError):
    """Raised when the exchange cannot be reached or answers unusably."""

    category = ErrorCategory.CONNECTIVITY_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(f"Exchange connectivity error: {reason}")
        self.reason = reason


class ExchangeTimeoutError(ExchangeDomainError):
    """Raised when one outbound call exceeds its deadline."""

    category = ErrorCategory.TIMEOUT

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"Exchange {operation} timed out after {timeout:g}s")
        self.operation = operation
        self.timeout = timeout


class SignatureError(ExchangeDomainError):
    """Raised when the secret key cannot be used as HMAC key material."""

    category = ErrorCategory.SIGNATURE_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(f"Could not sign request: {reason}")
        self.reason = reason


class MalformedResponseError(ExchangeDomainError):
    """Raised when a successful response lacks the data the caller needs."""

    category = ErrorCategory.MALFORMED_RESPONSE

    def __init__(self, reason: str) -> None:
        super().__init__(f"Unexpected exchange response: {reason}")
        self.reason = reason


class ExchangeApiError(ExchangeDomainError):
    """Raised when the exchange rejects a request with an error code."""

    def __init__(self, classified: ClassifiedError) -> None:
        super().__init__(classified.title)
        self.classified = classified
        self.category = classified.category


class CredentialsNotFoundError(ExchangeDomainError):
    """Raised when a user has no active credential pair on file."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No active exchange credentials for user: {user_id}")
        self.user_id = user_id

"""
Data Transfer Objects for the exchange application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional

from seravat.domain.exchange.entities import ValidationResult, ValuationResult


@dataclass(frozen=True)
class ValidateCredentialsCommand:
    """Input DTO for validating a credential pair.

    Attributes:
        api_key: Exchange API key as typed by the user.
        secret_key: Exchange secret key as typed by the user.
    """

    api_key: str
    secret_key: str


@dataclass(frozen=True)
class FetchBalanceQuery:
    """Input DTO for valuing a user's account.

    Attributes:
        user_id: Identifier used to look up stored credentials.
    """

    user_id: str


@dataclass(frozen=True)
class ConnectAccountCommand:
    """Input DTO for connecting an exchange account to a user.

    Attributes:
        user_id: Owner of the credentials.
        api_key: Exchange API key.
        secret_key: Exchange secret key.
    """

    user_id: str
    api_key: str
    secret_key: str


@dataclass(frozen=True)
class ConnectAccountResult:
    """Output DTO of an account connection.

    Attributes:
        validation: Outcome of the credential check.
        valuation: Initial valuation, None when not valid or not available.
    """

    validation: ValidationResult
    valuation: Optional[ValuationResult] = None

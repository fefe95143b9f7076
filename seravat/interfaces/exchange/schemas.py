"""
Pydantic schemas for exchange API request/response validation.

These schemas define the wire contract consumed by the dashboard UI.
Field names are camelCase on the wire and snake_case in Python.
Credential format rules are NOT enforced here: a malformed key must
produce a validation verdict, not a schema error.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def plain_decimal(value: Decimal) -> str:
    """Render a quantity without exponent or trailing zeros ("5", "0.25")."""
    return format(value.normalize(), "f")


class CamelModel(BaseModel):
    """Base schema serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidateCredentialsRequest(CamelModel):
    """Request schema for credential validation.

    Attributes:
        api_key: Exchange API key.
        secret_key: Exchange secret key.
    """

    api_key: str = Field(..., description="Exchange API key")
    secret_key: str = Field(..., description="Exchange secret key")


class ValidateCredentialsSuccess(CamelModel):
    """Response schema for accepted credentials."""

    valid: bool = True
    account_type: str
    permissions: list[str]
    can_trade: bool
    message: str


class ValidateCredentialsFailure(CamelModel):
    """Response schema for rejected credentials."""

    valid: bool = False
    error: str
    help: Optional[str] = None
    code: Union[int, str, None] = None


class FetchBalanceRequest(CamelModel):
    """Request schema for the balance endpoint.

    Attributes:
        user_id: Owner of the stored credentials.
    """

    user_id: str = Field(..., min_length=1, max_length=128)


class BalanceItem(CamelModel):
    """One non-dust asset of the account."""

    asset: str
    free: str
    locked: str
    total: str


class BalanceDebug(CamelModel):
    """Diagnostic counters attached to a balance response."""

    total_assets: int
    non_zero_assets: int
    calculated_total: float
    account_type: Optional[str] = None
    prices_available: bool


class FetchBalanceResponse(CamelModel):
    """Response schema for the balance endpoint."""

    balance: float
    balances: list[BalanceItem]
    success: bool = True
    message: str
    debug: BalanceDebug


class ConnectAccountRequest(CamelModel):
    """Request schema for connecting an exchange account."""

    user_id: str = Field(..., min_length=1, max_length=128)
    api_key: str
    secret_key: str


class ConnectAccountResponse(ValidateCredentialsSuccess):
    """Response schema for a connected account.

    ``balance`` is null when the initial valuation could not be read.
    """

    balance: Optional[float] = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    details: Optional[str] = None

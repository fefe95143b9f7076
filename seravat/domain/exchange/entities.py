"""
Domain entities for the exchange bounded context.

Entities are request-scoped value objects: they are created for one
call and never outlive it. They contain no framework imports and no IO.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Union


class ErrorCategory(Enum):
    """Failure taxonomy shared by credential validation and valuation."""

    FORMAT_ERROR = "FORMAT_ERROR"
    CONNECTIVITY_ERROR = "CONNECTIVITY_ERROR"
    TIMEOUT = "TIMEOUT"
    SIGNATURE_ERROR = "SIGNATURE_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CLOCK_SKEW = "CLOCK_SKEW"
    BAD_SIGNATURE = "BAD_SIGNATURE"
    KEY_DISABLED = "KEY_DISABLED"
    INVALID_FILTER = "INVALID_FILTER"
    UNKNOWN = "UNKNOWN"

    @property
    def is_server_side(self) -> bool:
        """True when the failure lies between us and the exchange, not with the caller."""
        return self in (ErrorCategory.CONNECTIVITY_ERROR, ErrorCategory.TIMEOUT)


@dataclass(frozen=True)
class CredentialPair:
    """An exchange API key and its signing secret.

    Opaque tokens: the key is sent as a request header, the secret is
    only ever used as HMAC key material.
    """

    api_key: str
    secret_key: str = field(repr=False)

    @property
    def masked_api_key(self) -> str:
        """Short prefix of the API key, safe for log lines."""
        return f"{self.api_key[:8]}..."


@dataclass(frozen=True)
class SignedQuery:
    """A canonical query string together with its signature."""

    api_key: str
    query: str
    signature: str


@dataclass(frozen=True)
class AssetBalance:
    """Free and locked holdings of one asset in an account snapshot."""

    asset: str
    free: Decimal
    locked: Decimal

    @property
    def total(self) -> Decimal:
        return self.free + self.locked


@dataclass(frozen=True)
class PriceQuote:
    """Last traded price of a pair, e.g. ETHUSDT -> 1500.00."""

    symbol: str
    price: Decimal


class PriceTable:
    """Read-only lookup of pair prices keyed by pair symbol."""

    def __init__(self, prices: Optional[dict[str, Decimal]] = None) -> None:
        self._prices = dict(prices or {})

    @classmethod
    def from_quotes(cls, quotes: Iterable[PriceQuote]) -> "PriceTable":
        """Build a table from ticker quotes. Later duplicates win."""
        return cls({q.symbol: q.price for q in quotes})

    def get(self, symbol: str) -> Optional[Decimal]:
        return self._prices.get(symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._prices

    def __len__(self) -> int:
        return len(self._prices)


@dataclass(frozen=True)
class ValuationLine:
    """One non-dust asset of a valuation breakdown."""

    asset: str
    free: Decimal
    locked: Decimal
    total: Decimal
    valuation_contribution: Decimal
    convertible: bool


@dataclass(frozen=True)
class ValuationMeta:
    """Bookkeeping attached to a valuation.

    Attributes:
        asset_count: Non-dust assets, convertible or not.
        convertible_count: Non-dust assets with a conversion path.
        account_type: Account type reported by the snapshot, if any.
        snapshot_asset_count: Assets in the raw snapshot, dust included.
        prices_available: False when the price table was empty.
        unpriced_assets: Non-dust assets that contributed zero for lack of a price.
    """

    asset_count: int
    convertible_count: int
    account_type: Optional[str]
    snapshot_asset_count: int
    prices_available: bool
    unpriced_assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValuationResult:
    """Total account valuation in the valuation currency."""

    total_valuation: Decimal
    valuation_currency: str
    breakdown: tuple[ValuationLine, ...]
    meta: ValuationMeta


@dataclass(frozen=True)
class ClassifiedError:
    """An exchange error translated into the fixed taxonomy.

    Attributes:
        category: Taxonomy bucket.
        raw_code: Numeric code reported by the exchange.
        raw_message: Exchange message, unchanged.
        title: Short user-facing description.
        remediation: What the user should do about it.
    """

    category: ErrorCategory
    raw_code: Optional[int]
    raw_message: str
    title: str
    remediation: str


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of one credential validation."""

    valid: bool
    account_type: Optional[str] = None
    permissions: tuple[str, ...] = ()
    can_trade: bool = False
    error: Optional[str] = None
    help: Optional[str] = None
    code: Union[int, str, None] = None
    category: Optional[ErrorCategory] = None

    @classmethod
    def success(
        cls, account_type: str, permissions: tuple[str, ...], can_trade: bool
    ) -> "ValidationResult":
        return cls(
            valid=True,
            account_type=account_type,
            permissions=permissions,
            can_trade=can_trade,
        )

    @classmethod
    def failure(
        cls,
        category: ErrorCategory,
        error: str,
        help: Optional[str] = None,
        code: Union[int, str, None] = None,
    ) -> "ValidationResult":
        return cls(
            valid=False,
            error=error,
            help=help,
            code=code if code is not None else category.value,
            category=category,
        )


# ------------------------------------------------------------------
# Exchange response union
# ------------------------------------------------------------------


@dataclass(frozen=True)
class AccountInfo:
    """Successful account-information response.

    ``balances`` is None when the body carried no balance list.
    """

    account_type: Optional[str]
    permissions: tuple[str, ...]
    can_trade: bool
    balances: Optional[tuple[AssetBalance, ...]]


@dataclass(frozen=True)
class ExchangeErrorPayload:
    """Error body returned by the exchange: ``{"code": -2015, "msg": "..."}``."""

    code: int
    message: str
    http_status: int


@dataclass(frozen=True)
class MalformedResponse:
    """A parseable body that is neither an account nor an exchange error."""

    http_status: int
    reason: str


AccountResponse = Union[AccountInfo, ExchangeErrorPayload, MalformedResponse]

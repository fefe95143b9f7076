"""
Tests for the exchange domain layer.

Tests signing, credential format rules, error classification and
entities in isolation. No external dependencies or IO required.
"""

from decimal import Decimal

import pytest

from seravat.domain.exchange.credential_rules import check_credential_format
from seravat.domain.exchange.entities import (
    CredentialPair,
    ErrorCategory,
    PriceQuote,
    PriceTable,
    ValidationResult,
)
from seravat.domain.exchange.error_classifier import ERROR_RULES, classify
from seravat.domain.exchange.errors import (
    CredentialsNotFoundError,
    ExchangeApiError,
    ExchangeTimeoutError,
    FormatError,
    SignatureError,
)
from seravat.domain.exchange.signing import canonical_query, sign, sign_query
from tests.fakes import API_KEY, SECRET_KEY, balance


class TestRequestSigner:
    """Tests for HMAC-SHA256 request signing."""

    def test_known_vector(self) -> None:
        """Signature matches the exchange's documented example."""
        query = (
            "symbol=LTCBTC&side=BUY&type=LIMIT&timeInForce=GTC"
            "&quantity=1&price=0.1&recvWindow=5000&timestamp=1499827319559"
        )
        assert sign(SECRET_KEY, query) == (
            "c8db56825ae71d6d79447849e617115f4a920fa2acdcab2b053c4b2838bd6b71"
        )

    def test_deterministic(self) -> None:
        query = canonical_query(1_700_000_000_000)
        assert sign(SECRET_KEY, query) == sign(SECRET_KEY, query)

    def test_one_character_changes_signature(self) -> None:
        assert sign(SECRET_KEY, "timestamp=1700000000000") != sign(
            SECRET_KEY, "timestamp=1700000000001"
        )

    def test_hex_lowercase_64_chars(self) -> None:
        signature = sign(SECRET_KEY, "timestamp=1")
        assert len(signature) == 64
        assert signature == signature.lower()
        int(signature, 16)

    def test_empty_secret_raises(self) -> None:
        with pytest.raises(SignatureError):
            sign("", "timestamp=1")

    def test_unencodable_secret_raises(self) -> None:
        with pytest.raises(SignatureError):
            sign("\ud800", "timestamp=1")

    def test_canonical_query(self) -> None:
        assert canonical_query(1234567890) == "timestamp=1234567890"

    def test_sign_query_carries_api_key(self) -> None:
        pair = CredentialPair(api_key=API_KEY, secret_key=SECRET_KEY)
        signed = sign_query(pair, 42)
        assert signed.api_key == API_KEY
        assert signed.query == "timestamp=42"
        assert signed.signature == sign(SECRET_KEY, "timestamp=42")


class TestCredentialFormat:
    """Tests for the local credential format gate."""

    def test_valid_pair_passes(self) -> None:
        check_credential_format(CredentialPair(API_KEY, SECRET_KEY))

    @pytest.mark.parametrize("length", [0, 1, 63, 65, 128])
    def test_wrong_api_key_length(self, length: int) -> None:
        with pytest.raises(FormatError) as exc_info:
            check_credential_format(CredentialPair("a" * length, SECRET_KEY))
        assert exc_info.value.field == "API Key"
        assert f"(got {length})" in exc_info.value.reason

    def test_wrong_secret_length(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            check_credential_format(CredentialPair(API_KEY, SECRET_KEY[:-1]))
        assert exc_info.value.field == "Secret Key"

    @pytest.mark.parametrize("bad_char", ["-", "_", " ", "é", "\n", "+"])
    def test_non_alphanumeric_rejected(self, bad_char: str) -> None:
        key = API_KEY[:-1] + bad_char
        with pytest.raises(FormatError) as exc_info:
            check_credential_format(CredentialPair(key, SECRET_KEY))
        assert "letters and digits" in exc_info.value.reason

    def test_surrounding_whitespace_not_trimmed(self) -> None:
        with pytest.raises(FormatError):
            check_credential_format(CredentialPair(f" {API_KEY}", SECRET_KEY))

    def test_format_error_category(self) -> None:
        assert FormatError("API Key", "x").category is ErrorCategory.FORMAT_ERROR


class TestErrorClassifier:
    """Tests for exchange error classification."""

    def test_invalid_credentials(self) -> None:
        result = classify(-2015, "Invalid API-key, IP, or permissions for action.")
        assert result.category is ErrorCategory.INVALID_CREDENTIALS
        assert result.remediation
        assert result.raw_code == -2015
        assert result.raw_message == "Invalid API-key, IP, or permissions for action."

    @pytest.mark.parametrize(
        "code, category",
        [
            (-1021, ErrorCategory.CLOCK_SKEW),
            (-1022, ErrorCategory.BAD_SIGNATURE),
            (-2014, ErrorCategory.KEY_DISABLED),
            (-1013, ErrorCategory.INVALID_FILTER),
        ],
    )
    def test_mapped_codes(self, code: int, category: ErrorCategory) -> None:
        result = classify(code, "whatever")
        assert result.category is category
        assert result.title
        assert result.remediation
        assert result.remediation != "whatever"

    def test_unmapped_code_passes_message_through(self) -> None:
        result = classify(-9999, "Something odd happened.")
        assert result.category is ErrorCategory.UNKNOWN
        assert result.raw_message == "Something odd happened."
        assert result.title == "Something odd happened."
        assert result.remediation == "Something odd happened."

    def test_missing_code_is_unknown(self) -> None:
        result = classify(None, "")
        assert result.category is ErrorCategory.UNKNOWN
        assert result.title == "Unknown exchange error"

    def test_every_rule_has_text(self) -> None:
        for code, rule in ERROR_RULES.items():
            assert rule.title, code
            assert rule.remediation, code


class TestEntities:
    """Tests for exchange value objects."""

    def test_asset_total(self) -> None:
        assert balance("ETH", "1.5", "0.25").total == Decimal("1.75")

    def test_secret_hidden_from_repr(self) -> None:
        pair = CredentialPair(API_KEY, SECRET_KEY)
        assert SECRET_KEY not in repr(pair)
        assert pair.masked_api_key == API_KEY[:8] + "..."

    def test_price_table_lookup(self) -> None:
        table = PriceTable.from_quotes(
            [PriceQuote("ETHUSDT", Decimal("1500")), PriceQuote("BTCUSDT", Decimal("60000"))]
        )
        assert len(table) == 2
        assert "ETHUSDT" in table
        assert table.get("ETHUSDT") == Decimal("1500")
        assert table.get("XRPUSDT") is None

    def test_failure_code_defaults_to_category(self) -> None:
        result = ValidationResult.failure(ErrorCategory.TIMEOUT, "timed out")
        assert result.valid is False
        assert result.code == "TIMEOUT"

    def test_server_side_categories(self) -> None:
        assert ErrorCategory.CONNECTIVITY_ERROR.is_server_side
        assert ErrorCategory.TIMEOUT.is_server_side
        assert not ErrorCategory.INVALID_CREDENTIALS.is_server_side
        assert not ErrorCategory.FORMAT_ERROR.is_server_side


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_exchange_api_error_takes_category(self) -> None:
        error = ExchangeApiError(classify(-1021, "Timestamp outside recvWindow"))
        assert error.category is ErrorCategory.CLOCK_SKEW
        assert error.message == "Clock synchronisation error"

    def test_timeout_error_message(self) -> None:
        error = ExchangeTimeoutError("server time check", 10.0)
        assert "10s" in error.message
        assert error.category is ErrorCategory.TIMEOUT

    def test_credentials_not_found_message(self) -> None:
        assert "user-1" in CredentialsNotFoundError("user-1").message

"""
Tests for the balance valuation service.

Pure domain logic: balances and price tables in, totals out.
"""

from decimal import Decimal

from seravat.domain.exchange.entities import PriceQuote, PriceTable
from seravat.domain.exchange.valuation import BalanceValuationService
from tests.fakes import balance


def _prices(**pairs: str) -> PriceTable:
    return PriceTable.from_quotes(
        [PriceQuote(symbol, Decimal(price)) for symbol, price in pairs.items()]
    )


MARKET = _prices(ETHUSDT="1500", BTCUSDT="60000", XRPBTC="0.00001")


class TestConversion:
    """Tests for per-asset conversion paths."""

    def setup_method(self) -> None:
        self.service = BalanceValuationService()

    def test_valuation_currency_at_face_value(self) -> None:
        assert self.service.convert("USDT", Decimal("100"), PriceTable()) == Decimal("100")

    def test_direct_pair(self) -> None:
        assert self.service.convert("ETH", Decimal("2"), MARKET) == Decimal("3000")

    def test_bridge_pair(self) -> None:
        assert self.service.convert("XRP", Decimal("20"), MARKET) == Decimal("12")

    def test_bridge_without_direct_pair(self) -> None:
        prices = _prices(XRPBTC="0.00002", BTCUSDT="60000")
        result = self.service.value([balance("XRP", "10")], prices)
        assert result.total_valuation == Decimal("12")
        assert result.meta.convertible_count == 1

    def test_direct_pair_preferred_over_bridge(self) -> None:
        prices = _prices(ETHUSDT="1500", ETHBTC="1", BTCUSDT="60000")
        assert self.service.convert("ETH", Decimal("1"), prices) == Decimal("1500")

    def test_bridge_needs_both_legs(self) -> None:
        assert self.service.convert("XRP", Decimal("20"), _prices(XRPBTC="0.00001")) is None

    def test_no_path(self) -> None:
        assert self.service.convert("XYZ", Decimal("5"), MARKET) is None

    def test_custom_currency(self) -> None:
        service = BalanceValuationService(valuation_currency="EUR", bridge_asset="ETH")
        prices = _prices(SOLETH="0.05", ETHEUR="2000")
        assert service.convert("SOL", Decimal("10"), prices) == Decimal("1000")


class TestValue:
    """Tests for full snapshot valuation."""

    def setup_method(self) -> None:
        self.service = BalanceValuationService()

    def test_mixed_snapshot(self) -> None:
        balances = [
            balance("USDT", "100"),
            balance("ETH", "1.5", "0.5"),
            balance("XRP", "20"),
            balance("XYZ", "5"),
            balance("BNB", "0.0005"),
        ]

        result = self.service.value(balances, MARKET, account_type="SPOT")

        assert result.total_valuation == Decimal("3112")
        assert result.valuation_currency == "USDT"
        assert [line.asset for line in result.breakdown] == ["USDT", "ETH", "XRP", "XYZ"]

        xyz = result.breakdown[3]
        assert xyz.convertible is False
        assert xyz.valuation_contribution == Decimal("0")
        assert xyz.total == Decimal("5")

        eth = result.breakdown[1]
        assert eth.free == Decimal("1.5")
        assert eth.locked == Decimal("0.5")
        assert eth.total == Decimal("2.0")
        assert eth.valuation_contribution == Decimal("3000")

        assert result.meta.asset_count == 4
        assert result.meta.convertible_count == 3
        assert result.meta.snapshot_asset_count == 5
        assert result.meta.account_type == "SPOT"
        assert result.meta.prices_available is True
        assert result.meta.unpriced_assets == ("XYZ",)

    def test_dust_threshold_is_inclusive(self) -> None:
        result = self.service.value(
            [balance("USDT", "0.001"), balance("BUSD", "0.0011")], PriceTable()
        )
        assert [line.asset for line in result.breakdown] == ["BUSD"]

    def test_locked_counts_towards_dust(self) -> None:
        result = self.service.value([balance("USDT", "0.0005", "0.0006")], PriceTable())
        assert result.total_valuation == Decimal("0.0011")

    def test_without_prices_only_currency_counts(self) -> None:
        result = self.service.value(
            [balance("USDT", "250"), balance("ETH", "1")], PriceTable()
        )
        assert result.total_valuation == Decimal("250")
        assert result.meta.prices_available is False
        assert result.meta.asset_count == 2
        assert result.meta.convertible_count == 1

    def test_empty_snapshot(self) -> None:
        result = self.service.value([], MARKET)
        assert result.total_valuation == Decimal("0")
        assert result.breakdown == ()
        assert result.meta.asset_count == 0
        assert result.meta.snapshot_asset_count == 0

    def test_custom_dust_threshold(self) -> None:
        service = BalanceValuationService(dust_threshold=Decimal("10"))
        result = service.value([balance("USDT", "9"), balance("USDT", "11")], PriceTable())
        assert result.total_valuation == Decimal("11")

    def test_decimal_sum_is_exact(self) -> None:
        result = self.service.value(
            [balance("USDT", "0.1"), balance("USDT", "0.2")], PriceTable()
        )
        assert result.total_valuation == Decimal("0.3")

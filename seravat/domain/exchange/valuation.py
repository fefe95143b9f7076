"""
Domain service: account valuation.

Converts a multi-asset balance snapshot into one total expressed in the
valuation currency.
No framework imports. No IO. No side effects.

Conversion order per asset:
    1. The valuation currency itself counts at face value.
    2. A direct pair ASSET + valuation currency.
    3. A two-hop bridge ASSET + bridge asset, bridge asset + valuation currency.
    4. Otherwise the asset contributes zero but stays in the breakdown.

Assets whose total is at or below the dust threshold are dropped entirely.
"""

from decimal import Decimal
from typing import Optional, Sequence

from seravat.domain.exchange.entities import (
    AssetBalance,
    PriceTable,
    ValuationLine,
    ValuationMeta,
    ValuationResult,
)

DEFAULT_VALUATION_CURRENCY = "USDT"
DEFAULT_BRIDGE_ASSET = "BTC"
DEFAULT_DUST_THRESHOLD = Decimal("0.001")

ZERO = Decimal("0")


class BalanceValuationService:
    """Values balance snapshots against a price table."""

    def __init__(
        self,
        valuation_currency: str = DEFAULT_VALUATION_CURRENCY,
        bridge_asset: str = DEFAULT_BRIDGE_ASSET,
        dust_threshold: Decimal = DEFAULT_DUST_THRESHOLD,
    ) -> None:
        """Initialize the valuation service.

        Args:
            valuation_currency: Unit every holding is converted to.
            bridge_asset: Intermediate asset for two-hop conversions.
            dust_threshold: Totals at or below this are ignored.
        """
        self._currency = valuation_currency
        self._bridge = bridge_asset
        self._dust_threshold = dust_threshold

    @property
    def valuation_currency(self) -> str:
        return self._currency

    def is_dust(self, balance: AssetBalance) -> bool:
        return balance.total <= self._dust_threshold

    def convert(self, asset: str, amount: Decimal, prices: PriceTable) -> Optional[Decimal]:
        """Convert an amount of one asset to the valuation currency.

        Returns:
            The converted value, or None when no conversion path exists.
        """
        if asset == self._currency:
            return amount

        direct = prices.get(f"{asset}{self._currency}")
        if direct is not None:
            return amount * direct

        to_bridge = prices.get(f"{asset}{self._bridge}")
        bridge_rate = prices.get(f"{self._bridge}{self._currency}")
        if to_bridge is not None and bridge_rate is not None:
            return amount * to_bridge * bridge_rate

        return None

    def value(
        self,
        balances: Sequence[AssetBalance],
        prices: PriceTable,
        account_type: Optional[str] = None,
    ) -> ValuationResult:
        """Compute the total valuation of a snapshot.

        Args:
            balances: Snapshot balances, in exchange order.
            prices: Pair prices; may be empty.
            account_type: Account type reported by the snapshot.

        Returns:
            A fresh ValuationResult. Contributions are summed in
            snapshot order.
        """
        lines: list[ValuationLine] = []
        unpriced: list[str] = []
        total_valuation = ZERO

        for balance in balances:
            if self.is_dust(balance):
                continue

            converted = self.convert(balance.asset, balance.total, prices)
            if converted is None:
                unpriced.append(balance.asset)
            else:
                total_valuation += converted

            lines.append(
                ValuationLine(
                    asset=balance.asset,
                    free=balance.free,
                    locked=balance.locked,
                    total=balance.total,
                    valuation_contribution=converted if converted is not None else ZERO,
                    convertible=converted is not None,
                )
            )

        meta = ValuationMeta(
            asset_count=len(lines),
            convertible_count=sum(1 for line in lines if line.convertible),
            account_type=account_type,
            snapshot_asset_count=len(balances),
            prices_available=len(prices) > 0,
            unpriced_assets=tuple(unpriced),
        )
        return ValuationResult(
            total_valuation=total_valuation,
            valuation_currency=self._currency,
            breakdown=tuple(lines),
            meta=meta,
        )

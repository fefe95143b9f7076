"""
Adapter: Portfolio snapshot persistence.

Implements PortfolioStore port.
Keeps the latest valuation per user in the portfolio_data table.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from seravat.domain.exchange.ports import PortfolioStore
from seravat.infrastructure.exchange.tables import portfolio_data

logger = logging.getLogger(__name__)


class PortfolioRepositoryAdapter(PortfolioStore):
    """SQL implementation of the portfolio store."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def upsert_snapshot(
        self, user_id: str, total_balance: Decimal, as_of: datetime
    ) -> None:
        """Insert or replace the user's latest valuation.

        Daily PnL is not tracked yet and is reset to zero on every snapshot.

        Args:
            user_id: Owner of the portfolio.
            total_balance: Valuation in the valuation currency.
            as_of: Time the valuation was computed.
        """
        statement = text(
            """
            INSERT INTO portfolio_data (user_id, total_balance, daily_pnl, last_updated)
            VALUES (:user_id, :total_balance, 0, :as_of)
            ON CONFLICT (user_id) DO UPDATE SET
                total_balance = excluded.total_balance,
                daily_pnl = excluded.daily_pnl,
                last_updated = excluded.last_updated
            """
        ).bindparams(
            bindparam("total_balance", type_=portfolio_data.c.total_balance.type),
            bindparam("as_of", type_=portfolio_data.c.last_updated.type),
        )
        with self._engine.begin() as conn:
            conn.execute(
                statement,
                {"user_id": user_id, "total_balance": total_balance, "as_of": as_of},
            )
        logger.info("Recorded portfolio snapshot for user=%s", user_id)

"""
Table definitions for the credential and portfolio stores.

SQLAlchemy Core metadata. ``create_schema`` is idempotent and runs at
application startup.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    Numeric,
    String,
    Table,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

user_exchange_credentials = Table(
    "user_exchange_credentials",
    metadata,
    Column("user_id", String(128), primary_key=True),
    Column("api_key", String(64), nullable=False),
    Column("secret_key", String(64), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

portfolio_data = Table(
    "portfolio_data",
    metadata,
    Column("user_id", String(128), primary_key=True),
    Column("total_balance", Numeric(28, 8), nullable=False),
    Column("daily_pnl", Numeric(28, 8), nullable=False, default=0),
    Column("last_updated", DateTime(timezone=True), nullable=False),
)


def create_schema(engine: Engine) -> None:
    """Create missing tables."""
    metadata.create_all(engine)

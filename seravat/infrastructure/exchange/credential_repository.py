"""
Adapter: Exchange credential repository.

Implements CredentialStore port.
Reads and writes the user_exchange_credentials table.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from seravat.domain.exchange.entities import CredentialPair
from seravat.domain.exchange.ports import CredentialStore
from seravat.infrastructure.exchange.tables import user_exchange_credentials

logger = logging.getLogger(__name__)


class CredentialRepositoryAdapter(CredentialStore):
    """SQL implementation of the credential store.

    One row per user; saving a pair replaces the previous one and
    marks it active.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_active(self, user_id: str) -> Optional[CredentialPair]:
        """Return the user's active credential pair, or None.

        Args:
            user_id: Owner of the credentials.
        """
        query = text(
            """
            SELECT api_key, secret_key
            FROM user_exchange_credentials
            WHERE user_id = :user_id AND is_active = :active
            """
        )
        with self._engine.connect() as conn:
            row = conn.execute(query, {"user_id": user_id, "active": True}).fetchone()

        if row is None:
            return None
        return CredentialPair(api_key=row[0], secret_key=row[1])

    def save(self, user_id: str, pair: CredentialPair) -> None:
        """Insert or replace the user's credentials as the active pair.

        Args:
            user_id: Owner of the credentials.
            pair: Validated credential pair.
        """
        now = datetime.now(timezone.utc)
        statement = text(
            """
            INSERT INTO user_exchange_credentials
                (user_id, api_key, secret_key, is_active, created_at, updated_at)
            VALUES (:user_id, :api_key, :secret_key, :active, :now, :now)
            ON CONFLICT (user_id) DO UPDATE SET
                api_key = excluded.api_key,
                secret_key = excluded.secret_key,
                is_active = excluded.is_active,
                updated_at = excluded.updated_at
            """
        ).bindparams(bindparam("now", type_=user_exchange_credentials.c.updated_at.type))
        with self._engine.begin() as conn:
            conn.execute(
                statement,
                {
                    "user_id": user_id,
                    "api_key": pair.api_key,
                    "secret_key": pair.secret_key,
                    "active": True,
                    "now": now,
                },
            )
        logger.info("Saved credentials for user=%s", user_id)

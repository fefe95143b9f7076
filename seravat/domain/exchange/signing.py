"""
Domain service: request signing.

HMAC-SHA256 over a canonical query string, hex encoded.
Pure functions. No IO, no clock access.
"""

import hashlib
import hmac

from seravat.domain.exchange.entities import CredentialPair, SignedQuery
from seravat.domain.exchange.errors import SignatureError


def canonical_query(timestamp_ms: int) -> str:
    """Return the byte-stable query string signed for account calls."""
    return f"timestamp={timestamp_ms}"


def sign(secret_key: str, query: str) -> str:
    """Sign a canonical query string with the secret key.

    Args:
        secret_key: Secret token used as HMAC key material.
        query: Exact query string to sign. Any reordering or
            re-encoding changes the signature.

    Returns:
        Lowercase hex HMAC-SHA256 digest.

    Raises:
        SignatureError: If the secret is empty or not encodable.
    """
    if not secret_key:
        raise SignatureError("secret key is empty")
    try:
        key = secret_key.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SignatureError("secret key is not valid UTF-8") from exc
    return hmac.new(key, query.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_query(pair: CredentialPair, timestamp_ms: int) -> SignedQuery:
    """Build and sign the timestamp query for a credential pair."""
    query = canonical_query(timestamp_ms)
    return SignedQuery(
        api_key=pair.api_key,
        query=query,
        signature=sign(pair.secret_key, query),
    )

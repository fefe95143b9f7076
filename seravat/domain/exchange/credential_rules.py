"""
Domain rules: credential format.

Malformed credentials are rejected locally, before any network call.
"""

import re

from seravat.domain.exchange.entities import CredentialPair
from seravat.domain.exchange.errors import FormatError

CREDENTIAL_LENGTH = 64
CREDENTIAL_PATTERN = re.compile(r"[A-Za-z0-9]+")


def _check_token(field: str, value: str) -> None:
    if len(value) != CREDENTIAL_LENGTH:
        raise FormatError(
            field,
            f"The {field} must be exactly {CREDENTIAL_LENGTH} characters "
            f"(got {len(value)})",
        )
    if not CREDENTIAL_PATTERN.fullmatch(value):
        raise FormatError(field, f"The {field} must contain only letters and digits")


def check_credential_format(pair: CredentialPair) -> None:
    """Validate both tokens of a credential pair.

    Values are checked as given; surrounding whitespace counts
    against the length and character rules.

    Raises:
        FormatError: On the first offending field, API key first.
    """
    _check_token("API Key", pair.api_key)
    _check_token("Secret Key", pair.secret_key)

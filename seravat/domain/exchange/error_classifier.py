"""
Domain service: exchange error classification.

Maps exchange-specific numeric error codes to a fixed taxonomy with
user-facing remediation text. Pure and deterministic. No IO.

Codes that are not in the table are classified as UNKNOWN and carry
the raw exchange message only.
"""

from dataclasses import dataclass
from typing import Optional

from seravat.domain.exchange.entities import ClassifiedError, ErrorCategory

INVALID_CREDENTIALS_HELP = """\
How to fix error -2015:

1. Check the API key:
   - Open your exchange account > API Management.
   - Make sure the key is enabled; re-enable it if it is not.

2. Grant the required permissions:
   - Enable "Reading".
   - Enable "Spot & Margin Trading".
   - Futures and Withdrawals are not needed.

3. Review IP access restrictions:
   - Either remove every IP restriction, or
   - add the IP address of this service to the whitelist.

4. Wait for propagation:
   - Changes can take 5-10 minutes to reach the exchange's API servers.

5. Re-check the key itself:
   - Copy the whole key (64 characters) with no leading or trailing spaces.

6. If nothing works:
   - Delete the key, create a new one, set the permissions again
     and wait 10 minutes before testing.

Error -2015 almost always means missing permissions or an IP restriction."""


@dataclass(frozen=True)
class _Rule:
    category: ErrorCategory
    title: str
    remediation: str


ERROR_RULES: dict[int, _Rule] = {
    -2015: _Rule(
        ErrorCategory.INVALID_CREDENTIALS,
        "API key is invalid or lacks the required permissions",
        INVALID_CREDENTIALS_HELP,
    ),
    -1021: _Rule(
        ErrorCategory.CLOCK_SKEW,
        "Clock synchronisation error",
        "The request timestamp is outside the exchange's accepted window. "
        "Try again shortly.",
    ),
    -1022: _Rule(
        ErrorCategory.BAD_SIGNATURE,
        "Invalid signature",
        "Check that the Secret Key is correct and complete (64 characters).",
    ),
    -2014: _Rule(
        ErrorCategory.KEY_DISABLED,
        "API key is disabled",
        "Check that the API key is correct and active in your exchange account.",
    ),
    -1013: _Rule(
        ErrorCategory.INVALID_FILTER,
        "Invalid request parameters",
        "The request was rejected by an exchange filter. "
        "Try re-creating the API credentials.",
    ),
}

UNKNOWN_TITLE = "Unknown exchange error"


def classify(raw_code: Optional[int], raw_message: str) -> ClassifiedError:
    """Translate a raw exchange error into a ClassifiedError.

    Args:
        raw_code: Numeric code from the exchange error body, if any.
        raw_message: Message from the exchange error body.

    Returns:
        The classified error. Unmapped codes yield UNKNOWN with the raw
        message as both title and remediation.
    """
    rule = ERROR_RULES.get(raw_code) if raw_code is not None else None
    if rule is None:
        return ClassifiedError(
            category=ErrorCategory.UNKNOWN,
            raw_code=raw_code,
            raw_message=raw_message,
            title=raw_message or UNKNOWN_TITLE,
            remediation=raw_message,
        )
    return ClassifiedError(
        category=rule.category,
        raw_code=raw_code,
        raw_message=raw_message,
        title=rule.title,
        remediation=rule.remediation,
    )

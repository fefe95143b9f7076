"""
Exchange bounded context: domain layer.

This module contains all domain logic for the exchange context:
- Request signing
- Credential format rules
- Exchange error classification
- Multi-asset balance valuation
"""

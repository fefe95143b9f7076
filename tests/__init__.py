"""
Test suite for the Seravat exchange gateway.

All tests run offline: the exchange is replaced by fakes or an
httpx.MockTransport, the stores by in-memory SQLite.
"""

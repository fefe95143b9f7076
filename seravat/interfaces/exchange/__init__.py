"""HTTP interface for the exchange bounded context."""

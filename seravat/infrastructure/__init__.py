"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where the exchange REST API,
the database, and other external integrations live.
"""

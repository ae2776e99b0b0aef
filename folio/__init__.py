"""Folio -- transaction ledger aggregation and portfolio analytics."""

__version__ = "0.1.0"

"""External data: ledger files, quote/series providers, fan-out and caching."""

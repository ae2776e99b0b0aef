"""Default values for the ledger, metrics and chart engines.

Every value here can be overridden from ``folio.yaml``. The risk weights are
a scoring policy, not a derived constant: change them in config, not here.
"""

# ---------------------------------------------------------------------------
# Ledger aggregation
# ---------------------------------------------------------------------------
LEDGER_DEFAULTS = {
    "quantity_epsilon": 1e-9,  # |quantity| at or below this is a closed position
}

# ---------------------------------------------------------------------------
# Diversification score weights (must sum to 100)
# ---------------------------------------------------------------------------
RISK_WEIGHTS = {
    "holding_count": 30,  # breadth: number of holdings vs target
    "top_holding": 30,    # 1 - largest position share
    "sector": 40,         # 1 - sector HHI
}

# Holding count at which the breadth component is saturated
TARGET_HOLDINGS = 20

# ---------------------------------------------------------------------------
# Time-series combiner
# ---------------------------------------------------------------------------
COMBINER_DEFAULTS = {
    "max_symbols": 30,
    "max_workers": 8,
    "fetch_timeout": 10.0,  # seconds for the whole fan-out
    "default_range": "1M",
}

# ---------------------------------------------------------------------------
# Quote freshness cache
# ---------------------------------------------------------------------------
CACHE_DEFAULTS = {
    "ttl_market_open": 30.0,      # seconds
    "ttl_market_closed": 300.0,   # seconds
    "market_timezone": "America/New_York",
    "market_open_minute": 570,    # 09:30
    "market_close_minute": 960,   # 16:00
}

# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------
CHART_COLORS = [
    "#6366f1", "#8b5cf6", "#a855f7", "#d946ef", "#ec4899",
    "#f43f5e", "#ef4444", "#f97316", "#eab308", "#22c55e",
    "#14b8a6", "#06b6d4", "#3b82f6", "#6366f1", "#8b5cf6",
]

SECTOR_COLORS = {
    "Technology": "#6366f1",
    "Healthcare": "#22c55e",
    "Financial Services": "#f97316",
    "Consumer Cyclical": "#ec4899",
    "Consumer Defensive": "#14b8a6",
    "Energy": "#ef4444",
    "Industrials": "#3b82f6",
    "Real Estate": "#a855f7",
    "Utilities": "#eab308",
    "Communication Services": "#d946ef",
    "Basic Materials": "#06b6d4",
    "Cash": "#a1a1aa",
    "Other": "#71717a",
}

UNCLASSIFIED_SECTOR = "Other"
CASH_SECTOR = "Cash"

TOP_MOVERS_LIMIT = 5

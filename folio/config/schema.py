"""Pydantic models for folio.yaml validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from folio.config.defaults import (
    CACHE_DEFAULTS,
    COMBINER_DEFAULTS,
    LEDGER_DEFAULTS,
    RISK_WEIGHTS,
    TARGET_HOLDINGS,
)

# ---------------------------------------------------------------------------
# Engine Configs
# ---------------------------------------------------------------------------

class LedgerConfig(BaseModel):
    quantity_epsilon: float = LEDGER_DEFAULTS["quantity_epsilon"]

    @field_validator("quantity_epsilon")
    @classmethod
    def epsilon_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("quantity_epsilon must be >= 0")
        return v


class RiskWeightsConfig(BaseModel):
    holding_count: float = RISK_WEIGHTS["holding_count"]
    top_holding: float = RISK_WEIGHTS["top_holding"]
    sector: float = RISK_WEIGHTS["sector"]
    target_holdings: int = TARGET_HOLDINGS

    @model_validator(mode="after")
    def weights_sum_to_100(self) -> "RiskWeightsConfig":
        total = self.holding_count + self.top_holding + self.sector
        if abs(total - 100) > 1e-6:
            raise ValueError(f"Diversification weights must sum to 100, got {total}")
        if self.target_holdings < 1:
            raise ValueError("target_holdings must be >= 1")
        return self


class CombinerConfig(BaseModel):
    max_symbols: int = COMBINER_DEFAULTS["max_symbols"]
    max_workers: int = COMBINER_DEFAULTS["max_workers"]
    fetch_timeout: float = COMBINER_DEFAULTS["fetch_timeout"]
    default_range: str = COMBINER_DEFAULTS["default_range"]

    @field_validator("max_symbols", "max_workers")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v


class CacheConfig(BaseModel):
    ttl_market_open: float = CACHE_DEFAULTS["ttl_market_open"]
    ttl_market_closed: float = CACHE_DEFAULTS["ttl_market_closed"]
    market_timezone: str = CACHE_DEFAULTS["market_timezone"]
    market_open_minute: int = CACHE_DEFAULTS["market_open_minute"]
    market_close_minute: int = CACHE_DEFAULTS["market_close_minute"]


# ---------------------------------------------------------------------------
# Accounts & Output
# ---------------------------------------------------------------------------

class AccountConfig(BaseModel):
    id: str
    name: str = ""


class OutputConfig(BaseModel):
    export_dir: str = "~/.folio/exports"
    chart_dir: str = "~/.folio/charts"


# ---------------------------------------------------------------------------
# Top-Level Config
# ---------------------------------------------------------------------------

class FolioConfig(BaseModel):
    """Root configuration model for Folio."""

    version: int = 1
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    risk: RiskWeightsConfig = Field(default_factory=RiskWeightsConfig)
    combiner: CombinerConfig = Field(default_factory=CombinerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    accounts: list[AccountConfig] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Coerce to proper defaults."""
        if isinstance(data, dict):
            if "accounts" in data and data["accounts"] is None:
                data["accounts"] = []
            for key in ("ledger", "risk", "combiner", "cache", "output"):
                if key in data and data[key] is None:
                    data[key] = {}
        return data

    @property
    def account_names(self) -> dict[str, str]:
        """account_id → display name (falls back to the id)."""
        return {a.id: a.name or a.id for a in self.accounts}

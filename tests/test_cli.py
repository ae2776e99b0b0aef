"""Tests for the click CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from folio import __version__
from folio.cli.main import cli
from folio.portfolio.holdings import Quote
from folio.series.combiner import PriceSample

ADAPTER = "folio.data.adapters.yfinance_adapter"

LEDGER = """id,account_id,symbol,type,quantity,price_per_unit,fees,timestamp
1,taxable,,deposit,1000,,,2026-01-02T15:00:00Z
2,taxable,AAPL,buy,10,150,0,2026-01-05T15:00:00Z
3,ira,AAPL,buy,5,160,0,2026-01-06T15:00:00Z
4,ira,MSFT,buy,2,400,0,2026-01-06T15:00:00Z
5,ira,MSFT,sell,3,410,0,2026-01-07T15:00:00Z
"""


@pytest.fixture
def ledger_path(tmp_path: Path) -> Path:
    path = tmp_path / "ledger.csv"
    path.write_text(LEDGER)
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "folio.yaml"
    path.write_text(
        "accounts:\n"
        "  - id: ira\n"
        "    name: Roth IRA\n"
        "output:\n"
        f"  chart_dir: {tmp_path / 'charts'}\n"
    )
    return path


def _run(config_path: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(config_path), *args])


class TestTopLevel:

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        for name in ("analytics", "chart", "config", "positions"):
            assert name in result.output


class TestPositions:

    def test_lists_positions_and_issues(self, config_path, ledger_path):
        result = _run(config_path, "positions", str(ledger_path))
        assert result.exit_code == 0, result.output
        assert "AAPL" in result.output
        assert "(cash)" in result.output
        assert "1,000.00" in result.output
        assert "oversell" in result.output

    def test_missing_file(self, config_path, tmp_path):
        result = _run(config_path, "positions", str(tmp_path / "nope.csv"))
        assert result.exit_code != 0

    def test_bad_columns(self, config_path, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("symbol,quantity\nAAPL,1\n")
        result = _run(config_path, "positions", str(path))
        assert result.exit_code == 1
        assert "missing required column" in result.output


class TestAnalytics:

    @patch(f"{ADAPTER}.fetch_sector", return_value="Technology")
    @patch(f"{ADAPTER}.fetch_quote")
    def test_report(self, mock_quote, mock_sector, config_path, ledger_path, tmp_path):
        mock_quote.side_effect = lambda s: Quote(s, 200.0, previous_close=190.0)
        export_dir = tmp_path / "exports"
        result = _run(config_path, "analytics", str(ledger_path), "--export", str(export_dir))
        assert result.exit_code == 0, result.output
        # AAPL 15 × 200 + cash 1000
        assert "$4,000.00" in result.output
        assert "Diversification score" in result.output
        assert "Roth IRA" in result.output
        assert (export_dir / "allocation.csv").exists()

    @patch(f"{ADAPTER}.fetch_sector")
    @patch(f"{ADAPTER}.fetch_quote", return_value=None)
    def test_no_quotes_valued_at_cost(self, mock_quote, mock_sector, config_path, ledger_path):
        result = _run(config_path, "analytics", str(ledger_path), "--no-sectors")
        assert result.exit_code == 0, result.output
        assert "No quote for: AAPL" in result.output
        mock_sector.assert_not_called()


class TestChart:

    @patch(f"{ADAPTER}.fetch_series")
    def test_writes_chart(self, mock_series, config_path, ledger_path, tmp_path):
        mock_series.return_value = [PriceSample(1_767_000_000.0, 100.0), PriceSample(1_767_086_400.0, 110.0)]
        out = tmp_path / "value.html"
        result = _run(config_path, "chart", str(ledger_path), "--range", "1y", "--output", str(out))
        assert result.exit_code == 0, result.output
        assert "2 points" in result.output
        assert out.exists()
        assert mock_series.call_args[0][0] == "AAPL"

    @patch(f"{ADAPTER}.fetch_series", return_value=[])
    def test_no_data_still_writes(self, mock_series, config_path, ledger_path, tmp_path):
        result = _run(config_path, "chart", str(ledger_path))
        assert result.exit_code == 0, result.output
        assert "No price data" in result.output
        assert (tmp_path / "charts" / "value_1M.html").exists()

    @patch(f"{ADAPTER}.fetch_series")
    def test_failed_symbol_noted_in_chart(self, mock_series, config_path, tmp_path):
        ledger = tmp_path / "two.csv"
        ledger.write_text(
            "id,account_id,symbol,type,quantity,price_per_unit,fees,timestamp\n"
            "1,ira,AAPL,buy,1,150,0,2026-01-05T15:00:00Z\n"
            "2,ira,MSFT,buy,1,400,0,2026-01-05T15:00:00Z\n"
        )

        def fetch(symbol, chart_range):
            if symbol == "MSFT":
                raise ConnectionError("MSFT unavailable")
            return [PriceSample(1_767_000_000.0, 100.0)]

        mock_series.side_effect = fetch
        out = tmp_path / "value.html"
        result = _run(config_path, "chart", str(ledger), "--output", str(out))
        assert result.exit_code == 0, result.output
        assert "1 points" in result.output
        html = out.read_text()
        assert "No data for MSFT" in html
        assert "No data for AAPL" not in html

    def test_unknown_range(self, config_path, ledger_path):
        result = _run(config_path, "chart", str(ledger_path), "--range", "2D")
        assert result.exit_code != 0


class TestConfigCommands:

    def test_show(self, config_path):
        result = _run(config_path, "config", "show")
        assert result.exit_code == 0
        assert '"max_symbols": 30' in result.output

    def test_validate_ok(self, config_path):
        result = _run(config_path, "config", "validate")
        assert result.exit_code == 0
        assert "Config is valid." in result.output
        assert "Accounts: 1" in result.output

    def test_validate_bad(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("combiner:\n  max_symbols: 0\n")
        result = _run(path, "config", "validate")
        assert result.exit_code == 1


class TestInit:

    def test_creates_dirs_and_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = tmp_path / "folio.yaml"
        config.write_text(
            f"output:\n  chart_dir: {tmp_path / 'c'}\n  export_dir: {tmp_path / 'e'}\n"
        )
        result = _run(config, "init")
        assert result.exit_code == 0, result.output
        assert (tmp_path / "c").is_dir()
        assert (tmp_path / "e").is_dir()
        written = tmp_path / ".folio" / "config.yaml"
        assert "brokerage" in written.read_text()

        again = _run(config, "init")
        assert "Kept existing" in again.output

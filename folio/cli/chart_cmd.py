"""Chart CLI command: combined portfolio value curve."""

from __future__ import annotations

import click

from folio.series.ranges import ChartRange


@click.command("chart")
@click.argument("ledger", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--range", "range_label",
    type=click.Choice([r.value for r in ChartRange], case_sensitive=False),
    default=None,
    help="Lookback range (default from config)",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="HTML file to write (default: <chart_dir>/value_<range>.html)")
@click.pass_context
def chart_cmd(ctx: click.Context, ledger: str, range_label: str | None, output: str | None) -> None:
    """Plot the quantity-weighted value curve of LEDGER's holdings."""
    from pathlib import Path

    from folio.cli.report_cmd import _load_ledger
    from folio.config.loader import load_config, resolve_path
    from folio.data.adapters.yfinance_adapter import fetch_series
    from folio.output.charts import build_value_curve, write_chart_html
    from folio.portfolio.holdings import build_holdings
    from folio.portfolio.ledger import aggregate_positions
    from folio.portfolio.report import chart_weights
    from folio.series.combiner import combine_series, fetch_weighted_series
    from folio.series.ranges import InvalidRequestError

    config = load_config(ctx.obj.get("config_path"))
    try:
        rng = ChartRange.parse(range_label or config.combiner.default_range)
    except InvalidRequestError as e:
        click.echo(f"Cannot chart: {e}", err=True)
        raise SystemExit(1) from None

    transactions = _load_ledger(ledger)
    ledger_result = aggregate_positions(transactions, config.ledger.quantity_epsilon)
    weights = chart_weights(build_holdings(ledger_result))
    if not weights:
        click.echo("No open positions to chart.")
        return

    try:
        fetched = fetch_weighted_series(
            weights, rng, fetch_series,
            max_symbols=config.combiner.max_symbols,
            max_workers=config.combiner.max_workers,
            timeout=config.combiner.fetch_timeout,
        )
    except InvalidRequestError as e:
        click.echo(f"Cannot chart: {e}", err=True)
        raise SystemExit(1) from None

    points = combine_series(fetched.series, rng)
    if points:
        first, last = points[0], points[-1]
        click.echo(f"{len(points)} points: {first.date_label} ${first.combined_price:,.2f} → "
                   f"{last.date_label} ${last.combined_price:,.2f}")
    else:
        click.echo("No price data for any holding in this range.")

    fig = build_value_curve(points, title=f"Portfolio Value ({rng.value})", missing=sorted(fetched.missing))
    path = Path(output) if output else resolve_path(config.output.chart_dir) / f"value_{rng.value}.html"
    click.echo(f"Chart written to {write_chart_html(fig, path)}")

"""Report CLI commands: positions, analytics."""

from __future__ import annotations

import click


def _load_ledger(path: str):
    from folio.data.ledger_file import load_transactions

    try:
        result = load_transactions(path)
    except (OSError, ValueError) as e:
        click.echo(f"Could not read ledger {path}: {e}", err=True)
        raise SystemExit(1) from None
    for err in result.errors:
        click.echo(f"  [skipped] {err}", err=True)
    return result.transactions


@click.command("positions")
@click.argument("ledger", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def positions_cmd(ctx: click.Context, ledger: str) -> None:
    """Replay LEDGER and print open positions and cash balances."""
    from folio.config.loader import load_config
    from folio.portfolio.ledger import aggregate_positions

    config = load_config(ctx.obj.get("config_path"))
    transactions = _load_ledger(ledger)
    result = aggregate_positions(transactions, quantity_epsilon=config.ledger.quantity_epsilon)

    if not result.positions and not result.cash_balances:
        click.echo("No open positions.")
    else:
        click.echo(f"{'Account':<14} {'Symbol':<22} {'Quantity':>14} {'Avg Cost':>12} {'Total Cost':>14}")
        click.echo("-" * 80)
        for pos in result.positions.values():
            click.echo(
                f"{pos.account_id:<14} {pos.symbol:<22} {pos.quantity:>14,.4f} "
                f"{pos.average_cost_basis:>12,.2f} {pos.total_cost:>14,.2f}"
            )
        for cash in result.cash_balances.values():
            click.echo(f"{cash.account_id:<14} {'(cash)':<22} {'':>14} {'':>12} {cash.balance:>14,.2f}")

    if result.issues:
        click.echo(f"\n{len(result.issues)} data-quality issue(s):")
        for issue in result.issues:
            click.echo(f"  {issue.kind:<18} {issue.account_id}/{issue.symbol} (tx {issue.transaction_id}): "
                       f"{issue.detail}")


@click.command("analytics")
@click.argument("ledger", type=click.Path(exists=True, dir_okay=False))
@click.option("--export", "export_dir", type=click.Path(file_okay=False), default=None,
              help="Write CSV tables to this directory")
@click.option("--no-sectors", is_flag=True, help="Skip sector lookups")
@click.pass_context
def analytics_cmd(ctx: click.Context, ledger: str, export_dir: str | None, no_sectors: bool) -> None:
    """Price LEDGER with live quotes and print performance, allocation and risk."""
    from folio.config.loader import load_config
    from folio.data.adapters.yfinance_adapter import fetch_quote, fetch_sector
    from folio.data.cache import fetch_quotes
    from folio.data.fanout import fetch_concurrently
    from folio.output.export import export_report
    from folio.portfolio.ledger import aggregate_positions
    from folio.portfolio.report import build_portfolio_report

    config = load_config(ctx.obj.get("config_path"))
    transactions = _load_ledger(ledger)
    symbols = aggregate_positions(transactions, config.ledger.quantity_epsilon).symbols

    click.echo(f"Fetching quotes for {len(symbols)} symbol(s)...")
    quotes = fetch_quotes(
        symbols, fetch_quote,
        max_workers=config.combiner.max_workers,
        timeout=config.combiner.fetch_timeout,
    )
    sectors = {} if no_sectors else fetch_concurrently(
        symbols, fetch_sector,
        max_workers=config.combiner.max_workers,
        timeout=config.combiner.fetch_timeout,
    )

    report = build_portfolio_report(transactions, quotes, sectors, config=config)
    perf = report.performance

    click.echo("\nPerformance")
    click.echo(f"  Value:      ${perf.total_value:,.2f}")
    click.echo(f"  Cost:       ${perf.total_cost:,.2f}")
    click.echo(f"  Gain:       ${perf.total_gain:,.2f} ({perf.total_gain_percent:+.2f}%)")
    click.echo(f"  Day:        ${perf.day_change:,.2f} ({perf.day_change_percent:+.2f}%)")
    if perf.best_performer:
        click.echo(f"  Best:       {perf.best_performer.symbol} ({perf.best_performer.gain_percent:+.2f}%)")
    if perf.worst_performer:
        click.echo(f"  Worst:      {perf.worst_performer.symbol} ({perf.worst_performer.gain_percent:+.2f}%)")

    click.echo("\nAllocation")
    for row in report.allocation:
        click.echo(f"  {row.symbol:<22} ${row.value:>14,.2f} {row.percentage:>7.2f}%")

    click.echo("\nSectors")
    for srow in report.sector_allocation:
        click.echo(f"  {srow.sector:<22} ${srow.value:>14,.2f} {srow.percentage:>7.2f}% ({srow.holdings})")

    risk = report.risk
    click.echo("\nRisk")
    click.echo(f"  Diversification score: {risk.diversification_score}/100")
    click.echo(f"  Top holding:           {risk.top_holding_concentration:.2f}%")
    click.echo(f"  Sector HHI:            {risk.sector_concentration:.4f}")
    click.echo(f"  Accounts:              {risk.account_count}")

    if report.overlaps:
        click.echo("\nOverlaps")
        for ov in report.overlaps:
            click.echo(f"  {ov.symbol:<22} {ov.total_quantity:>12,.4f} ${ov.total_value:>14,.2f}  "
                       f"[{', '.join(ov.accounts)}]")

    if report.unpriced:
        click.echo(f"\nNo quote for: {', '.join(report.unpriced)} (valued at cost)")
    if report.ledger.issues:
        click.echo(f"\n{len(report.ledger.issues)} data-quality issue(s); run `folio positions` for detail")

    if export_dir:
        written = export_report(report, export_dir)
        click.echo(f"\nExported {len(written)} table(s) to {export_dir}")

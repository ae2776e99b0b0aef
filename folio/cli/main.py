"""Top-level CLI entry point for Folio."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from folio import __version__


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option(
    "--config",
    type=click.Path(),
    default=None,
    envvar="FOLIO_CONFIG",
    help="Path to folio.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Folio -- ledger-driven portfolio analytics."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# Register sub-commands
from folio.cli.chart_cmd import chart_cmd  # noqa: E402
from folio.cli.config_cmd import config_group  # noqa: E402
from folio.cli.report_cmd import analytics_cmd, positions_cmd  # noqa: E402

cli.add_command(analytics_cmd, "analytics")
cli.add_command(chart_cmd, "chart")
cli.add_command(config_group, "config")
cli.add_command(positions_cmd, "positions")


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing ~/.folio/config.yaml")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create output directories and a starter ~/.folio/config.yaml."""
    import yaml

    from folio.config.loader import load_config, resolve_path

    config = load_config(ctx.obj.get("config_path"))

    for dir_attr in ("export_dir", "chart_dir"):
        dir_path = resolve_path(getattr(config.output, dir_attr))
        dir_path.mkdir(parents=True, exist_ok=True)
        click.echo(f"  Created {dir_path}")

    user_config = Path("~/.folio/config.yaml").expanduser()
    if user_config.exists() and not force:
        click.echo(f"  Kept existing {user_config}")
    else:
        user_config.parent.mkdir(parents=True, exist_ok=True)
        starter = config.model_dump()
        starter["accounts"] = starter["accounts"] or [{"id": "brokerage", "name": "Brokerage"}]
        user_config.write_text(yaml.safe_dump(starter, sort_keys=False))
        click.echo(f"  Wrote {user_config}")

    click.echo("\nFolio initialized.")
    click.echo("Next steps:")
    click.echo(f"  1. Edit {user_config} to name your accounts")
    click.echo("  2. Run: folio positions ledger.csv")
    click.echo("  3. Run: folio analytics ledger.csv --export ~/.folio/exports")

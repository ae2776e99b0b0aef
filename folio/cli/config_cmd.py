"""Config CLI commands: show, validate."""

from __future__ import annotations

import click


@click.group("config")
def config_group() -> None:
    """Manage configuration."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the resolved configuration."""
    from folio.config.loader import load_config

    config = load_config(ctx.obj.get("config_path"))
    import json

    click.echo(json.dumps(config.model_dump(), indent=2, default=str))


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate folio.yaml against the schema."""
    import yaml
    from pydantic import ValidationError

    from folio.config.loader import load_config

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (ValidationError, ValueError, yaml.YAMLError, OSError) as e:
        click.echo(f"Config validation failed: {e}", err=True)
        raise SystemExit(1) from None

    risk = config.risk
    click.echo("Config is valid.")
    click.echo(f"  Version: {config.version}")
    click.echo(f"  Accounts: {len(config.accounts)}")
    click.echo(f"  Risk weights: count={risk.holding_count:g}, top={risk.top_holding:g}, "
               f"sector={risk.sector:g} (target {risk.target_holdings} holdings)")
    click.echo(f"  Chart: max {config.combiner.max_symbols} symbols, "
               f"{config.combiner.fetch_timeout:g}s fetch deadline")

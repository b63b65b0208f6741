"""Configuration commands for pkupdates CLI.

Commands:
- config show: Print the effective configuration
- config set: Change one configuration value
"""

from __future__ import annotations

import click

from pkupdates.core.config import ConfigError, get_config_file, load_config, save_config


@click.group()
def config() -> None:
    """Show or change configuration."""


@config.command("show")
def show() -> None:
    """Print the effective configuration."""
    try:
        current = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"# {get_config_file()}")
    for key, value in current.to_dict().items():
        click.echo(f"{key} = {str(value).lower() if isinstance(value, bool) else value}")


@config.command("set")
@click.argument("key")
@click.argument("value")
def set_value(key: str, value: str) -> None:
    """Set configuration KEY to VALUE."""
    try:
        updated = load_config().with_value(key, value)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    save_config(updated)
    click.echo(f"{key} updated")

"""Command-line interface for pkupdates.

This module provides the main CLI entry point and assembles all commands.

Commands:
- package-name: Print the name part of a package id
- package-version: Print the version part of a package id
- last-check: Show when the software list was last refreshed
- config: Show or change configuration
"""

from __future__ import annotations

import logging

import click

from pkupdates.cli.config import config
from pkupdates.cli.packages import package_name_cmd, package_version_cmd
from pkupdates.cli.status import last_check


@click.group()
@click.version_option(package_name="pkupdates")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """pkupdates - System update checks through the package-manager daemon."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Package id helpers
cli.add_command(package_name_cmd)
cli.add_command(package_version_cmd)

# State and configuration
cli.add_command(last_check)
cli.add_command(config)

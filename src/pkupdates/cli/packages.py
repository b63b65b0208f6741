"""Package id commands for pkupdates CLI.

Commands:
- package-name: Print the name part of a package id
- package-version: Print the version part of a package id
"""

from __future__ import annotations

import click

from pkupdates.daemon.package_id import package_name, package_version


@click.command("package-name")
@click.argument("package_id")
def package_name_cmd(package_id: str) -> None:
    """Print the name of PACKAGE_ID (name;version;arch;repo)."""
    click.echo(package_name(package_id))


@click.command("package-version")
@click.argument("package_id")
def package_version_cmd(package_id: str) -> None:
    """Print the version of PACKAGE_ID (name;version;arch;repo)."""
    click.echo(package_version(package_id))

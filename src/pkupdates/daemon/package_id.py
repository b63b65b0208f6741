"""Helpers for daemon package identifiers.

A package id has the form ``name;version;arch;repo``.
"""

from __future__ import annotations

SEPARATOR = ";"


def _field(package_id: str, index: int) -> str:
    parts = package_id.split(SEPARATOR)
    if index < len(parts):
        return parts[index]
    return ""


def package_name(package_id: str) -> str:
    """Get the package name from its id.

    Examples:
        >>> package_name("foo;1.2.3;x86_64;repo")
        'foo'
    """
    return _field(package_id, 0)


def package_version(package_id: str) -> str:
    """Get the package version from its id."""
    return _field(package_id, 1)


def package_arch(package_id: str) -> str:
    """Get the package architecture from its id."""
    return _field(package_id, 2)


def package_repo(package_id: str) -> str:
    """Get the repository (data field) from its id."""
    return _field(package_id, 3)

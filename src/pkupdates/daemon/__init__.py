"""Daemon module - Interface, events and enums of the package-manager daemon."""

from pkupdates.daemon.base import PackageDaemon, Transaction
from pkupdates.daemon.events import (
    ErrorReported,
    EulaRequired,
    Finished,
    PackageReported,
    ProgressChanged,
    RepoSignatureRequired,
    RestartRequired,
    StatusChanged,
    TransactionEvent,
    UpdateDetailReported,
)
from pkupdates.daemon.package_id import (
    package_arch,
    package_name,
    package_repo,
    package_version,
)
from pkupdates.daemon.types import (
    ErrorCode,
    Exit,
    Info,
    NetworkState,
    Restart,
    Role,
    Status,
    TransactionFlag,
)

__all__ = [
    # Interface
    "PackageDaemon",
    "Transaction",
    # Events
    "ErrorReported",
    "EulaRequired",
    "Finished",
    "PackageReported",
    "ProgressChanged",
    "RepoSignatureRequired",
    "RestartRequired",
    "StatusChanged",
    "TransactionEvent",
    "UpdateDetailReported",
    # Package ids
    "package_arch",
    "package_name",
    "package_repo",
    "package_version",
    # Enums
    "ErrorCode",
    "Exit",
    "Info",
    "NetworkState",
    "Restart",
    "Role",
    "Status",
    "TransactionFlag",
]

"""Event messages emitted by daemon transactions.

Every signal a transaction can raise is an explicit, immutable dataclass.
Transactions hand these to the callback registered with
``Transaction.connect()``; the coordinator queues them and processes them
one at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pkupdates.daemon.types import ErrorCode, Exit, Info, Restart, Status


@dataclass(frozen=True)
class StatusChanged:
    """The transaction moved to a new status.

    Attributes:
        status: New transaction status.
        speed: Download speed in bytes/second (0 if unknown).
        download_size_remaining: Bytes left to download (0 if unknown).
    """

    status: Status
    speed: int = 0
    download_size_remaining: int = 0


@dataclass(frozen=True)
class ProgressChanged:
    """Transaction percentage changed (101 or more means unknown)."""

    percentage: int


@dataclass(frozen=True)
class PackageReported:
    """A package was reported by the transaction."""

    info: Info
    package_id: str
    summary: str = ""


@dataclass(frozen=True)
class UpdateDetailReported:
    """Details about a single update."""

    package_id: str
    update_text: str = ""
    vendor_urls: tuple[str, ...] = field(default_factory=tuple)
    bugzilla_urls: tuple[str, ...] = field(default_factory=tuple)
    cve_urls: tuple[str, ...] = field(default_factory=tuple)
    restart: Restart = Restart.NONE
    changelog: str = ""


@dataclass(frozen=True)
class RestartRequired:
    """Installing a package requires a restart."""

    restart: Restart
    package_id: str


@dataclass(frozen=True)
class RepoSignatureRequired:
    """A repository key must be trusted before the transaction can continue."""

    package_id: str
    repo_name: str
    key_url: str = ""
    key_userid: str = ""
    key_id: str = ""
    key_fingerprint: str = ""
    key_timestamp: str = ""


@dataclass(frozen=True)
class EulaRequired:
    """A license agreement must be accepted before installing a package."""

    eula_id: str
    package_id: str
    vendor: str
    license_agreement: str


@dataclass(frozen=True)
class ErrorReported:
    """The transaction reported an error. A ``Finished`` event follows."""

    code: ErrorCode
    details: str = ""


@dataclass(frozen=True)
class Finished:
    """The transaction is over.

    Attributes:
        exit: Exit code.
        runtime_ms: Transaction runtime in milliseconds.
    """

    exit: Exit
    runtime_ms: int = 0


TransactionEvent = (
    StatusChanged
    | ProgressChanged
    | PackageReported
    | UpdateDetailReported
    | RestartRequired
    | RepoSignatureRequired
    | EulaRequired
    | ErrorReported
    | Finished
)

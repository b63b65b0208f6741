"""Updates module - Coordinator, catalog, EULA negotiation and progress."""

from pkupdates.updates.catalog import CatalogSnapshot, PackageEntry, UpdateCatalog
from pkupdates.updates.coordinator import TransactionCoordinator
from pkupdates.updates.errors import (
    AuthenticationRequiredError,
    ErrorKind,
    EulaRequiredError,
    LicenseDeclinedError,
    LockedOrBusyError,
    NetworkUnavailableError,
    PermissionDeniedError,
    RepositorySignatureError,
    UpdatesError,
    classify,
)
from pkupdates.updates.eula import EulaDecision, EulaNegotiator, EulaRequest
from pkupdates.updates.handle import HandleKind, TransactionHandle
from pkupdates.updates.progress import ProgressTracker
from pkupdates.updates.snapshot import UpdatesSnapshot
from pkupdates.updates.state import StateStore
from pkupdates.updates.types import CheckRequest, InstallRequest, UpdateDetail

__all__ = [
    # Coordinator
    "TransactionCoordinator",
    "CheckRequest",
    "InstallRequest",
    "UpdateDetail",
    "UpdatesSnapshot",
    "StateStore",
    # Components
    "CatalogSnapshot",
    "PackageEntry",
    "UpdateCatalog",
    "EulaDecision",
    "EulaNegotiator",
    "EulaRequest",
    "HandleKind",
    "TransactionHandle",
    "ProgressTracker",
    # Errors
    "AuthenticationRequiredError",
    "ErrorKind",
    "EulaRequiredError",
    "LicenseDeclinedError",
    "LockedOrBusyError",
    "NetworkUnavailableError",
    "PermissionDeniedError",
    "RepositorySignatureError",
    "UpdatesError",
    "classify",
]

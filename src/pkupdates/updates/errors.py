"""Error classification for daemon transactions.

This module provides:
- ErrorKind: How the coordinator reacts to an error
- UpdatesError and subclasses: Classified errors surfaced to callers
- classify: Map a daemon error code to an ErrorKind
- make_error: Build the UpdatesError for a daemon error
"""

from __future__ import annotations

from enum import IntEnum, auto

from pkupdates.core.strings import error_title
from pkupdates.daemon.types import ErrorCode


class ErrorKind(IntEnum):
    """Classification of a failed transaction."""

    NETWORK_UNAVAILABLE = auto()  # Deferred retry for automatic checks
    AUTHENTICATION_REQUIRED = auto()
    PERMISSION_DENIED = auto()
    REPOSITORY_SIGNATURE_REQUIRED = auto()  # Never auto-retried
    EULA_REQUIRED = auto()  # Redirected to the EULA negotiation
    LOCKED_OR_BUSY = auto()  # Next user check retries
    LICENSE_DECLINED = auto()
    GENERIC = auto()


_CLASSIFICATION: dict[ErrorCode, ErrorKind] = {
    ErrorCode.NO_NETWORK: ErrorKind.NETWORK_UNAVAILABLE,
    ErrorCode.CANNOT_FETCH_SOURCES: ErrorKind.NETWORK_UNAVAILABLE,
    ErrorCode.NO_CACHE: ErrorKind.NETWORK_UNAVAILABLE,
    ErrorCode.NOT_AUTHORIZED: ErrorKind.AUTHENTICATION_REQUIRED,
    ErrorCode.NOT_AUTHORIZED_NO_INTERACTION: ErrorKind.AUTHENTICATION_REQUIRED,
    ErrorCode.CANNOT_WRITE_REPO_CONFIG: ErrorKind.PERMISSION_DENIED,
    ErrorCode.GPG_FAILURE: ErrorKind.REPOSITORY_SIGNATURE_REQUIRED,
    ErrorCode.BAD_GPG_SIGNATURE: ErrorKind.REPOSITORY_SIGNATURE_REQUIRED,
    ErrorCode.MISSING_GPG_SIGNATURE: ErrorKind.REPOSITORY_SIGNATURE_REQUIRED,
    ErrorCode.CANNOT_INSTALL_REPO_UNSIGNED: ErrorKind.REPOSITORY_SIGNATURE_REQUIRED,
    ErrorCode.CANNOT_UPDATE_REPO_UNSIGNED: ErrorKind.REPOSITORY_SIGNATURE_REQUIRED,
    ErrorCode.NO_LICENSE_AGREEMENT: ErrorKind.EULA_REQUIRED,
    ErrorCode.CANNOT_GET_LOCK: ErrorKind.LOCKED_OR_BUSY,
    ErrorCode.LOCK_REQUIRED: ErrorKind.LOCKED_OR_BUSY,
    ErrorCode.FAILED_INITIALIZATION: ErrorKind.LOCKED_OR_BUSY,
}


def classify(code: ErrorCode) -> ErrorKind:
    """Classify a daemon error code."""
    return _CLASSIFICATION.get(code, ErrorKind.GENERIC)


class UpdatesError(Exception):
    """Base class for classified update errors.

    Attributes:
        kind: Classification of the error.
        title: Short human-readable description.
        details: Raw detail text from the daemon (may be empty).
        code: Daemon error code, None for locally detected errors.
    """

    kind = ErrorKind.GENERIC

    def __init__(
        self,
        title: str,
        details: str = "",
        code: ErrorCode | None = None,
    ) -> None:
        self.title = title
        self.details = details
        self.code = code
        super().__init__(f"{title}: {details}" if details else title)


class NetworkUnavailableError(UpdatesError):
    """No network connection to fetch from software origins."""

    kind = ErrorKind.NETWORK_UNAVAILABLE


class AuthenticationRequiredError(UpdatesError):
    """The user is not authorized to perform the action."""

    kind = ErrorKind.AUTHENTICATION_REQUIRED


class PermissionDeniedError(UpdatesError):
    """The daemon is not permitted to perform the action."""

    kind = ErrorKind.PERMISSION_DENIED


class RepositorySignatureError(UpdatesError):
    """A repository signature must be trusted first."""

    kind = ErrorKind.REPOSITORY_SIGNATURE_REQUIRED


class EulaRequiredError(UpdatesError):
    """A license agreement must be accepted first."""

    kind = ErrorKind.EULA_REQUIRED


class LockedOrBusyError(UpdatesError):
    """The package manager is busy with another task."""

    kind = ErrorKind.LOCKED_OR_BUSY


class LicenseDeclinedError(UpdatesError):
    """The user declined a license agreement."""

    kind = ErrorKind.LICENSE_DECLINED


_ERROR_CLASSES: dict[ErrorKind, type[UpdatesError]] = {
    cls.kind: cls
    for cls in (
        UpdatesError,
        NetworkUnavailableError,
        AuthenticationRequiredError,
        PermissionDeniedError,
        RepositorySignatureError,
        EulaRequiredError,
        LockedOrBusyError,
        LicenseDeclinedError,
    )
}


def make_error(code: ErrorCode, details: str = "") -> UpdatesError:
    """Build the classified error for a daemon error code."""
    cls = _ERROR_CLASSES[classify(code)]
    return cls(error_title(code), details, code=code)

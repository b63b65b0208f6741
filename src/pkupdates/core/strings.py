"""Human-readable texts for daemon enums."""

from __future__ import annotations

from pkupdates.daemon.types import ErrorCode, Info, Restart, Status

_STATUS_TEXT: dict[Status, str] = {
    Status.UNKNOWN: "Unknown state",
    Status.WAIT: "Waiting to start",
    Status.SETUP: "Waiting to start",
    Status.RUNNING: "Running",
    Status.QUERY: "Querying",
    Status.INFO: "Getting information",
    Status.REMOVE: "Removing packages",
    Status.REFRESH_CACHE: "Refreshing software list",
    Status.DOWNLOAD: "Downloading packages",
    Status.INSTALL: "Installing packages",
    Status.UPDATE: "Updating packages",
    Status.CLEANUP: "Cleaning up packages",
    Status.OBSOLETE: "Obsoleting packages",
    Status.DEP_RESOLVE: "Resolving dependencies",
    Status.SIG_CHECK: "Checking signatures",
    Status.TEST_COMMIT: "Testing changes",
    Status.COMMIT: "Committing changes",
    Status.REQUEST: "Requesting data",
    Status.FINISHED: "Finished",
    Status.CANCEL: "Cancelling",
    Status.DOWNLOAD_REPOSITORY: "Downloading repository information",
    Status.DOWNLOAD_PACKAGELIST: "Downloading list of packages",
    Status.DOWNLOAD_FILELIST: "Downloading file lists",
    Status.DOWNLOAD_CHANGELOG: "Downloading lists of changes",
    Status.DOWNLOAD_GROUP: "Downloading groups",
    Status.DOWNLOAD_UPDATEINFO: "Downloading update information",
    Status.REPACKAGING: "Repackaging files",
    Status.LOADING_CACHE: "Loading cache",
    Status.SCAN_APPLICATIONS: "Scanning installed applications",
    Status.GENERATE_PACKAGE_LIST: "Generating package lists",
    Status.WAITING_FOR_LOCK: "Waiting for package manager lock",
    Status.WAITING_FOR_AUTH: "Waiting for authentication",
    Status.SCAN_PROCESS_LIST: "Updating running applications",
    Status.CHECK_EXECUTABLE_FILES: "Checking applications in use",
    Status.CHECK_LIBRARIES: "Checking libraries in use",
    Status.COPY_FILES: "Copying files",
}

_INFO_PRESENT: dict[Info, str] = {
    Info.DOWNLOADING: "Downloading",
    Info.UPDATING: "Updating",
    Info.INSTALLING: "Installing",
    Info.REMOVING: "Removing",
    Info.CLEANUP: "Cleaning up",
    Info.OBSOLETING: "Obsoleting",
    Info.REINSTALLING: "Reinstalling",
    Info.DOWNGRADING: "Downgrading",
    Info.PREPARING: "Preparing",
    Info.DECOMPRESSING: "Decompressing",
    Info.FINISHED: "Finished",
}

_ERROR_TITLE: dict[ErrorCode, str] = {
    ErrorCode.OOM: "Out of memory",
    ErrorCode.NO_NETWORK: "No network connection available",
    ErrorCode.NOT_SUPPORTED: "Not supported by this backend",
    ErrorCode.INTERNAL_ERROR: "An internal system error has occurred",
    ErrorCode.GPG_FAILURE: "A security trust relationship is not present",
    ErrorCode.DEP_RESOLUTION_FAILED: "Dependency resolution failed",
    ErrorCode.TRANSACTION_CANCELLED: "The task was canceled",
    ErrorCode.NO_CACHE: "No package cache is available",
    ErrorCode.CANNOT_GET_LOCK: "Failed to get lock",
    ErrorCode.NOT_AUTHORIZED: "Not authorized",
    ErrorCode.CANNOT_WRITE_REPO_CONFIG: "Cannot write repository configuration",
    ErrorCode.BAD_GPG_SIGNATURE: "Bad GPG signature",
    ErrorCode.MISSING_GPG_SIGNATURE: "Missing GPG signature",
    ErrorCode.NO_LICENSE_AGREEMENT: "The license agreement failed",
    ErrorCode.FILE_CONFLICTS: "Local file conflict between packages",
    ErrorCode.PACKAGE_CONFLICTS: "Packages are not compatible",
    ErrorCode.REPO_NOT_AVAILABLE: "Problem connecting to a software origin",
    ErrorCode.NO_SPACE_ON_DEVICE: "No space is left on the disk",
    ErrorCode.CANNOT_FETCH_SOURCES: "Could not fetch software origins",
    ErrorCode.CANNOT_INSTALL_REPO_UNSIGNED: "Cannot install from untrusted origin",
    ErrorCode.CANNOT_UPDATE_REPO_UNSIGNED: "Cannot update from untrusted origin",
    ErrorCode.LOCK_REQUIRED: "The package manager is busy",
    ErrorCode.FAILED_INITIALIZATION: "Failed to initialize",
}

_RESTART_TEXT: dict[Restart, tuple[str, str]] = {
    Restart.SYSTEM: (
        "Restart is required",
        "The computer will have to be restarted after the update "
        "for the changes to take effect.",
    ),
    Restart.SECURITY_SYSTEM: (
        "Restart is required",
        "The computer will have to be restarted after the update "
        "for the changes to take effect.",
    ),
    Restart.SESSION: (
        "Session restart is required",
        "You will need to log out and back in after the update "
        "for the changes to take effect.",
    ),
    Restart.SECURITY_SESSION: (
        "Session restart is required",
        "You will need to log out and back in after the update "
        "for the changes to take effect.",
    ),
}


def format_bytes(size: int) -> str:
    """Format a byte count for display (e.g. ``3.4 MB``)."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1000 or unit == "GB":
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1000
    return f"{value:.1f} GB"


def status_text(status: Status, speed: int = 0, download_size_remaining: int = 0) -> str:
    """Describe what a transaction is doing.

    Download statuses mention the speed and the remaining size when known.
    """
    text = _STATUS_TEXT.get(status, "Working")
    if status != Status.DOWNLOAD:
        return text
    if speed > 0 and download_size_remaining > 0:
        return (
            f"{text} at {format_bytes(speed)}/s, "
            f"{format_bytes(download_size_remaining)} remaining"
        )
    if speed > 0:
        return f"{text} at {format_bytes(speed)}/s"
    if download_size_remaining > 0:
        return f"{text}, {format_bytes(download_size_remaining)} remaining"
    return text


def info_present(info: Info) -> str:
    """Verb describing what happens to a package during an install."""
    return _INFO_PRESENT.get(info, "Processing")


def error_title(code: ErrorCode) -> str:
    """Short title for a daemon error."""
    return _ERROR_TITLE.get(code, "Unknown error")


def restart_text(restart: Restart) -> tuple[str, str] | None:
    """Title and body describing a restart requirement, if one is needed."""
    return _RESTART_TEXT.get(restart)

"""Enumerations reported by the package-manager daemon.

This module provides:
- Info: Package info kinds (update category or install progress verb)
- Status: Transaction status values
- Exit: Transaction exit codes
- ErrorCode: Daemon error codes
- Restart: Restart requirements
- NetworkState: Daemon view of the network
- TransactionFlag: Flags for package-modifying transactions
- Role: What a transaction does

String values follow the daemon's own enum names so that an adapter can map
wire values with ``Enum(value)``.
"""

from __future__ import annotations

from enum import Enum, Flag, auto


class Info(str, Enum):
    """Package info kind.

    During enumeration this is the update category; during installation it
    describes what is happening to the package.
    """

    UNKNOWN = "unknown"
    LOW = "low"
    ENHANCEMENT = "enhancement"
    NORMAL = "normal"
    BUGFIX = "bugfix"
    IMPORTANT = "important"
    SECURITY = "security"
    BLOCKED = "blocked"

    # Install progress
    DOWNLOADING = "downloading"
    UPDATING = "updating"
    INSTALLING = "installing"
    REMOVING = "removing"
    CLEANUP = "cleanup"
    OBSOLETING = "obsoleting"
    REINSTALLING = "reinstalling"
    DOWNGRADING = "downgrading"
    PREPARING = "preparing"
    DECOMPRESSING = "decompressing"
    FINISHED = "finished"


class Status(str, Enum):
    """Transaction status."""

    UNKNOWN = "unknown"
    WAIT = "wait"
    SETUP = "setup"
    RUNNING = "running"
    QUERY = "query"
    INFO = "info"
    REMOVE = "remove"
    REFRESH_CACHE = "refresh-cache"
    DOWNLOAD = "download"
    INSTALL = "install"
    UPDATE = "update"
    CLEANUP = "cleanup"
    OBSOLETE = "obsolete"
    DEP_RESOLVE = "dep-resolve"
    SIG_CHECK = "sig-check"
    TEST_COMMIT = "test-commit"
    COMMIT = "commit"
    REQUEST = "request"
    FINISHED = "finished"
    CANCEL = "cancel"
    DOWNLOAD_REPOSITORY = "download-repository"
    DOWNLOAD_PACKAGELIST = "download-packagelist"
    DOWNLOAD_FILELIST = "download-filelist"
    DOWNLOAD_CHANGELOG = "download-changelog"
    DOWNLOAD_GROUP = "download-group"
    DOWNLOAD_UPDATEINFO = "download-updateinfo"
    REPACKAGING = "repackaging"
    LOADING_CACHE = "loading-cache"
    SCAN_APPLICATIONS = "scan-applications"
    GENERATE_PACKAGE_LIST = "generate-package-list"
    WAITING_FOR_LOCK = "waiting-for-lock"
    WAITING_FOR_AUTH = "waiting-for-auth"
    SCAN_PROCESS_LIST = "scan-process-list"
    CHECK_EXECUTABLE_FILES = "check-executable-files"
    CHECK_LIBRARIES = "check-libraries"
    COPY_FILES = "copy-files"


class Exit(str, Enum):
    """Transaction exit code."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    KEY_REQUIRED = "key-required"
    EULA_REQUIRED = "eula-required"
    KILLED = "killed"
    MEDIA_CHANGE_REQUIRED = "media-change-required"
    NEED_UNTRUSTED = "need-untrusted"
    CANCELLED_PRIORITY = "cancelled-priority"
    SKIP_TRANSACTION = "skip-transaction"
    REPAIR_REQUIRED = "repair-required"


class ErrorCode(str, Enum):
    """Daemon error code."""

    UNKNOWN = "unknown"
    OOM = "out-of-memory"
    NO_NETWORK = "no-network"
    NOT_SUPPORTED = "not-supported"
    INTERNAL_ERROR = "internal-error"
    GPG_FAILURE = "gpg-failure"
    PACKAGE_NOT_INSTALLED = "package-not-installed"
    PACKAGE_NOT_FOUND = "package-not-found"
    PACKAGE_ALREADY_INSTALLED = "package-already-installed"
    PACKAGE_DOWNLOAD_FAILED = "package-download-failed"
    DEP_RESOLUTION_FAILED = "dep-resolution-failed"
    CREATE_THREAD_FAILED = "create-thread-failed"
    TRANSACTION_ERROR = "transaction-error"
    TRANSACTION_CANCELLED = "transaction-cancelled"
    NO_CACHE = "no-cache"
    REPO_NOT_FOUND = "repo-not-found"
    CANNOT_REMOVE_SYSTEM_PACKAGE = "cannot-remove-system-package"
    FAILED_INITIALIZATION = "failed-initialization"
    FAILED_FINALISE = "failed-finalise"
    FAILED_CONFIG_PARSING = "failed-config-parsing"
    CANNOT_CANCEL = "cannot-cancel"
    CANNOT_GET_LOCK = "cannot-get-lock"
    NOT_AUTHORIZED = "not-authorized"
    CANNOT_WRITE_REPO_CONFIG = "cannot-write-repo-config"
    LOCAL_INSTALL_FAILED = "local-install-failed"
    BAD_GPG_SIGNATURE = "bad-gpg-signature"
    MISSING_GPG_SIGNATURE = "missing-gpg-signature"
    CANNOT_INSTALL_SOURCE_PACKAGE = "cannot-install-source-package"
    REPO_CONFIGURATION_ERROR = "repo-configuration-error"
    NO_LICENSE_AGREEMENT = "no-license-agreement"
    FILE_CONFLICTS = "file-conflicts"
    PACKAGE_CONFLICTS = "package-conflicts"
    REPO_NOT_AVAILABLE = "repo-not-available"
    INVALID_PACKAGE_FILE = "invalid-package-file"
    PACKAGE_INSTALL_BLOCKED = "package-install-blocked"
    PACKAGE_CORRUPT = "package-corrupt"
    ALL_PACKAGES_ALREADY_INSTALLED = "all-packages-already-installed"
    FILE_NOT_FOUND = "file-not-found"
    NO_MORE_MIRRORS_TO_TRY = "no-more-mirrors-to-try"
    NO_DISTRO_UPGRADE_DATA = "no-distro-upgrade-data"
    INCOMPATIBLE_ARCHITECTURE = "incompatible-architecture"
    NO_SPACE_ON_DEVICE = "no-space-on-device"
    MEDIA_CHANGE_REQUIRED = "media-change-required"
    NOT_AUTHORIZED_NO_INTERACTION = "not-authorized-no-interaction"
    CANNOT_FETCH_SOURCES = "cannot-fetch-sources"
    CANNOT_INSTALL_REPO_UNSIGNED = "cannot-install-repo-unsigned"
    CANNOT_UPDATE_REPO_UNSIGNED = "cannot-update-repo-unsigned"
    UPDATE_FAILED_DUE_TO_RUNNING_PROCESS = "update-failed-due-to-running-process"
    PACKAGE_DATABASE_CHANGED = "package-database-changed"
    LOCK_REQUIRED = "lock-required"


class Restart(str, Enum):
    """Restart required after an update."""

    UNKNOWN = "unknown"
    NONE = "none"
    APPLICATION = "application"
    SESSION = "session"
    SYSTEM = "system"
    SECURITY_SESSION = "security-session"
    SECURITY_SYSTEM = "security-system"


class NetworkState(str, Enum):
    """Network state as reported by the daemon."""

    UNKNOWN = "unknown"
    OFFLINE = "offline"
    ONLINE = "online"
    WIRED = "wired"
    WIFI = "wifi"
    MOBILE = "mobile"

    @property
    def is_online(self) -> bool:
        """Whether packages can be fetched over this network."""
        return self not in (NetworkState.UNKNOWN, NetworkState.OFFLINE)


class TransactionFlag(Flag):
    """Flags for package-modifying transactions."""

    NONE = 0
    ONLY_TRUSTED = auto()
    SIMULATE = auto()
    ONLY_DOWNLOAD = auto()


class Role(str, Enum):
    """What a transaction does."""

    REFRESH_CACHE = "refresh-cache"
    GET_UPDATES = "get-updates"
    GET_UPDATE_DETAIL = "get-update-detail"
    UPDATE_PACKAGES = "update-packages"
    ACCEPT_EULA = "accept-eula"

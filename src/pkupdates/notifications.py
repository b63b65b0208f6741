"""Desktop notifications for pkupdates.

This module provides:
- Native OS notifications (Linux notify-send, macOS notification center)
- Helpers for the update events worth telling the user about
- attach_notifications: Wire the helpers to a TransactionCoordinator
"""

from __future__ import annotations

import logging
import platform
import subprocess
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from pkupdates.core.strings import restart_text

if TYPE_CHECKING:
    from pkupdates.daemon.types import Restart
    from pkupdates.updates.coordinator import TransactionCoordinator
    from pkupdates.updates.errors import UpdatesError

logger = logging.getLogger(__name__)

APP_NAME = "pkupdates"


class NotificationType(Enum):
    """Severity of a notification, mapped to notify-send urgencies."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()


_URGENCY = {
    NotificationType.INFO: "low",
    NotificationType.WARNING: "normal",
    NotificationType.ERROR: "critical",
}


@dataclass
class Notification:
    """A desktop notification about updates."""

    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    icon: str = "system-software-update"


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def notification_command(notification: Notification, system: str) -> list[str] | None:
    """Command line showing the notification on the given OS.

    Args:
        notification: What to show.
        system: ``platform.system()`` value.

    Returns:
        The argv to run, or None if the OS is not supported.
    """
    if system == "Linux":
        return [
            "notify-send",
            f"--urgency={_URGENCY[notification.type]}",
            f"--app-name={APP_NAME}",
            f"--icon={notification.icon}",
            notification.title,
            notification.message,
        ]
    if system == "Darwin":
        script = (
            f"display notification {_applescript_quote(notification.message)} "
            f"with title {_applescript_quote(notification.title)}"
        )
        return ["osascript", "-e", script]
    return None


def send_notification(notification: Notification) -> bool:
    """Show a notification, ignoring failures.

    Returns:
        True if the notifier ran successfully.
    """
    system = platform.system()
    command = notification_command(notification, system)
    if command is None:
        logger.warning("Notifications not supported on %s", system)
        return False

    try:
        subprocess.run(command, capture_output=True, check=True)
    except FileNotFoundError:
        logger.debug("%s not found, notification dropped", command[0])
        return False
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("Notification %r failed: %s", notification.title, e)
        return False
    return True


def notify_updates_available(count: int) -> bool:
    """Announce newly available updates.

    Args:
        count: Number of available updates.

    Returns:
        True if notification was sent.
    """
    if count <= 0:
        return False  # Nothing to announce

    message = "You have 1 new update" if count == 1 else f"You have {count} new updates"
    return send_notification(Notification(
        title="Updates available",
        message=message,
    ))


def notify_updates_installed(package_ids: list[str]) -> bool:
    """Announce a successful install.

    Args:
        package_ids: Updated packages.

    Returns:
        True if notification was sent.
    """
    count = len(package_ids)
    noun = "package" if count == 1 else "packages"
    return send_notification(Notification(
        title="Updates installed",
        message=f"Successfully updated {count} {noun}",
    ))


def notify_restart_required(restart: Restart, package_id: str = "") -> bool:
    """Ask the user to restart the system or the session.

    Args:
        restart: Kind of restart required.
        package_id: Package requiring it.

    Returns:
        True if notification was sent.
    """
    logger.debug("Restart %s required by %s", restart.value, package_id or "unknown package")
    text = restart_text(restart)
    if text is None:
        return False
    title, message = text
    return send_notification(Notification(
        title=title,
        message=message,
        type=NotificationType.WARNING,
        icon="system-reboot",
    ))


def notify_error(error: UpdatesError) -> bool:
    """Send an error notification.

    Args:
        error: The classified error.

    Returns:
        True if notification was sent.
    """
    return send_notification(Notification(
        title=error.title,
        message=error.details or error.title,
        type=NotificationType.ERROR,
        icon="dialog-error",
    ))


def attach_notifications(coordinator: TransactionCoordinator) -> None:
    """Show desktop notifications for coordinator events.

    Does nothing if notifications are disabled in the coordinator's config.
    """
    if not coordinator.config.notifications:
        logger.debug("Desktop notifications disabled")
        return

    coordinator.new_updates_available.connect(notify_updates_available)
    coordinator.updates_installed.connect(notify_updates_installed)
    coordinator.restart_required.connect(notify_restart_required)
    coordinator.error_occurred.connect(notify_error)

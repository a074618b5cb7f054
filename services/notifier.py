"""Desktop notification sinks."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional, Protocol

from models.records import NotificationPayload
from settings import APP_NAME

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, payload: NotificationPayload) -> bool: ...


class DesktopNotifier:
    """Shows the alert through the freedesktop ``notify-send`` command."""

    def __init__(self, executable: Optional[str] = None, timeout: float = 5.0) -> None:
        self.executable = executable or shutil.which("notify-send")
        self.timeout = timeout

    def send(self, payload: NotificationPayload) -> bool:
        if not self.executable:
            logger.warning("notify-send is not available; skipping desktop alert")
            return False

        command = [
            self.executable,
            "--app-name",
            APP_NAME,
            "--icon",
            payload.icon_key,
            payload.summary,
            payload.body,
        ]
        try:
            completed = subprocess.run(
                command, capture_output=True, text=True, timeout=self.timeout, check=False
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("Desktop alert failed: %s", exc, extra={"icon": payload.icon_key})
            return False

        if completed.returncode != 0:
            logger.warning(
                "Desktop alert failed: %s",
                completed.stderr.strip() or f"exit code {completed.returncode}",
                extra={"icon": payload.icon_key},
            )
            return False
        return True


class NullNotifier:
    """Accepts every payload without showing anything."""

    def send(self, payload: NotificationPayload) -> bool:
        logger.debug("Desktop alert suppressed: %s", payload.summary)
        return True

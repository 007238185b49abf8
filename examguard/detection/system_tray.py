"""
System tray monitoring.
"""

from typing import Set

from ..core.base import BaseDetector
from ..utils.process_utils import ProcessUtils


class SystemTrayMonitor(BaseDetector):
    """Reports tray icons appearing and disappearing, flagging suspicious ones."""

    name = "system_tray"

    def __init__(self, configuration, provider, publish=None):
        super().__init__(configuration, provider, publish)
        self.known_tray_apps: Set[str] = set()

    def _detect(self) -> None:
        tray_apps = self.snapshot('tray_applications')
        if tray_apps is None:
            return

        self.debug("System tray applications: %s", ", ".join(tray_apps))

        for tray_app in tray_apps:
            lower_name = tray_app.lower()
            if lower_name in self.known_tray_apps:
                continue
            self.known_tray_apps.add(lower_name)
            if ProcessUtils.first_match(lower_name, self.config.suspicious_processes):
                self.emit("ALERT_SUSPICIOUS_TRAY_APP",
                          f"Detected suspicious application in system tray: {tray_app}")
            else:
                self.emit("INFO_NEW_TRAY_APP", f"New application detected in system tray: {tray_app}")

        current = {tray_app.lower() for tray_app in tray_apps}
        for removed in sorted(self.known_tray_apps - current):
            self.known_tray_apps.discard(removed)
            self.emit("INFO_TRAY_APP_REMOVED", f"Application removed from system tray: {removed}")

"""
macOS capability provider (AppleScript, ioreg, system_profiler).
"""

import logging
import re
from typing import Dict, List

from ..core.config import Config
from .system import SystemProvider

logger = logging.getLogger(__name__)

FRONT_WINDOW_SCRIPT = """
tell application "System Events"
    set frontApp to name of first application process whose frontmost is true
    tell process frontApp
        try
            set windowTitle to name of front window
        on error
            set windowTitle to ""
        end try
    end tell
    return frontApp & " - " & windowTitle
end tell
"""

MENU_BAR_SCRIPT = """
tell application "System Events"
    set appNames to {}
    repeat with proc in (application processes whose background only is false)
        try
            if exists menu bar 2 of proc then set end of appNames to name of proc
        end try
    end repeat
    return appNames
end tell
"""

# Canonical browser name -> AppleScript application name
APPLESCRIPT_BROWSERS = {
    'chrome': 'Google Chrome',
    'safari': 'Safari',
    'brave': 'Brave Browser',
    'edge': 'Microsoft Edge',
    'opera': 'Opera',
}


class MacOSProvider(SystemProvider):
    """macOS sampling via osascript, ioreg, lsof and psutil."""

    platform_name = "macOS"

    CAMERA_MARKERS = ['AppleCamera', 'iSight', 'VDC', 'AppleH13CamIn']
    SERIAL_PATTERN = re.compile(r"Serial Number[^:]*:\s*(.+)")
    IDLE_PATTERN = re.compile(r'"HIDIdleTime"\s*=\s*(\d+)')

    def osascript(self, script: str) -> str:
        return self.run_command(["osascript", "-e", script]).strip()

    def _active_window_title(self) -> str:
        title = self.osascript(FRONT_WINDOW_SCRIPT)
        return title[:-3] if title.endswith(" - ") else title

    def _tray_applications(self) -> List[str]:
        result = self.osascript(MENU_BAR_SCRIPT)
        return [item.strip() for item in result.split(", ") if item.strip()]

    def _camera_active(self) -> bool:
        output = self.run_command(["lsof", "-n"], timeout=Config.SUBPROCESS_TIMEOUT * 2)
        return any(marker in output for marker in self.CAMERA_MARKERS)

    def _user_active(self) -> bool:
        output = self.run_command(["ioreg", "-c", "IOHIDSystem"])
        match = self.IDLE_PATTERN.search(output)
        if match is None:
            return self.seconds_since_activity() < Config.USER_IDLE_SECONDS
        idle_seconds = int(match.group(1)) / 1_000_000_000
        return idle_seconds < Config.USER_IDLE_SECONDS

    def _device_identifier(self) -> str:
        output = self.run_command(["system_profiler", "SPHardwareDataType"],
                                  timeout=Config.SUBPROCESS_TIMEOUT * 2)
        match = self.SERIAL_PATTERN.search(output)
        return match.group(1).strip() if match else ""

    def _browser_tab_counts(self) -> Dict[str, int]:
        counts = super()._browser_tab_counts()
        # AppleScript reports exact tab counts for scriptable browsers
        for browser in list(counts):
            app_name = APPLESCRIPT_BROWSERS.get(browser)
            if app_name is None:
                continue
            result = self.osascript(f'tell application "{app_name}" to count every tab of every window')
            numbers = [int(n) for n in re.findall(r"\d+", result)]
            if numbers:
                counts[browser] = sum(numbers)
        return counts

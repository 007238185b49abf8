"""
Linux capability provider (X11 utilities, /proc, D-Bus tray watcher).
"""

import glob
import logging
import os
from pathlib import Path
from typing import List

import psutil

from ..core.config import Config
from .system import SystemProvider

logger = logging.getLogger(__name__)


class LinuxProvider(SystemProvider):
    """Linux sampling via xdotool, xprintidle, dbus-send and psutil."""

    platform_name = "Linux"

    TRAY_PROCESS_MARKERS = ['indicator', 'tray', 'status']
    AUDIO_DEVICE_PATTERN = "/dev/snd/pcmC*c"
    VIDEO_DEVICE_PATTERN = "/dev/video*"
    DEVICE_ID_FILES = ["/etc/machine-id", "/var/lib/dbus/machine-id", "/sys/class/dmi/id/product_uuid"]

    def __init__(self):
        super().__init__()
        self._listeners = []
        self._start_activity_listeners()

    def _start_activity_listeners(self) -> None:
        """Track keyboard and mouse activity; needs a running X session."""
        if not os.environ.get("DISPLAY"):
            logger.info("No X display; user activity falls back to xprintidle")
            return
        try:
            from pynput import keyboard, mouse

            self._listeners = [
                mouse.Listener(on_move=self.record_activity, on_click=self.record_activity,
                               on_scroll=self.record_activity),
                keyboard.Listener(on_press=self.record_activity),
            ]
            for listener in self._listeners:
                listener.daemon = True
                listener.start()
        except Exception as e:
            logger.warning("Input listeners unavailable, using xprintidle only: %s", e)
            self._listeners = []

    def _active_window_title(self) -> str:
        output = self.run_command(["xdotool", "getwindowfocus", "getwindowname"])
        return output.strip().splitlines()[0] if output.strip() else ""

    def _tray_applications(self) -> List[str]:
        tray_apps = []
        output = self.run_command([
            "dbus-send", "--session", "--dest=org.kde.StatusNotifierWatcher",
            "--type=method_call", "--print-reply", "/StatusNotifierWatcher",
            "org.freedesktop.DBus.Properties.Get",
            "string:org.kde.StatusNotifierWatcher",
            "string:RegisteredStatusNotifierItems"
        ])
        for line in output.splitlines():
            line = line.strip()
            if not line.startswith("string"):
                continue
            parts = line.split('"')
            if len(parts) >= 2:
                app_name = parts[1].split("/")[0]
                if app_name and app_name not in tray_apps:
                    tray_apps.append(app_name)

        if not tray_apps:
            # Desktop environments without the watcher: look for indicator processes
            for name in self.iter_process_names():
                lower_name = name.lower()
                if any(marker in lower_name for marker in self.TRAY_PROCESS_MARKERS) and name not in tray_apps:
                    tray_apps.append(name)
        return tray_apps

    def _device_open_by_any_process(self, pattern: str) -> bool:
        devices = set(glob.glob(pattern))
        if not devices:
            return False
        for proc in psutil.process_iter(['open_files']):
            try:
                for open_file in proc.info.get('open_files') or []:
                    if open_file.path in devices:
                        return True
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        # open_files() misses character devices on some kernels; lsof sees them
        return bool(self.run_command(["lsof", "-t", *sorted(devices)]).strip())

    def _camera_active(self) -> bool:
        return self._device_open_by_any_process(self.VIDEO_DEVICE_PATTERN)

    def _microphone_active(self) -> bool:
        if self._device_open_by_any_process(self.AUDIO_DEVICE_PATTERN):
            return True
        return super()._microphone_active()

    def _user_active(self) -> bool:
        if self._listeners and self.seconds_since_activity() < Config.USER_IDLE_SECONDS:
            return True
        output = self.run_command(["xprintidle"]).strip()
        if output.isdigit():
            return int(output) < Config.USER_IDLE_SECONDS * 1000
        return self.seconds_since_activity() < Config.USER_IDLE_SECONDS

    def _device_identifier(self) -> str:
        for path in self.DEVICE_ID_FILES:
            try:
                value = Path(path).read_text(encoding='utf-8').strip()
            except OSError:
                continue
            if value:
                return value
        return ""

    def _release(self) -> None:
        for listener in self._listeners:
            listener.stop()
        self._listeners = []

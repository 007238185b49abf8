"""
Windows capability provider (pygetwindow, win32api idle time, wmic).
"""

import hashlib
import logging
import os
from typing import List

import pygetwindow as gw
import win32api

from ..core.config import Config
from .system import SystemProvider

logger = logging.getLogger(__name__)


class WindowsProvider(SystemProvider):
    """Windows sampling via pygetwindow, psutil, win32api and wmic."""

    platform_name = "Windows"

    TRAY_PROCESS_MARKERS = ['tray', 'systray', 'notify', 'background']
    COMMON_TRAY_APPS = ['discord.exe', 'slack.exe', 'teams.exe', 'onedrive.exe', 'dropbox.exe']
    CAMERA_PROCESSES = ['zoom', 'teams', 'webex', 'skype']
    MEETING_WINDOW_MARKERS = ['meet.google.com', 'google meet']
    SHARING_WINDOW_MARKERS = ['you are presenting', 'presenting', 'screen sharing', 'sharing your screen']

    def _active_window_title(self) -> str:
        window = gw.getActiveWindow()
        return window.title if window is not None else ""

    def _tray_applications(self) -> List[str]:
        tray_apps = []
        for name in self.iter_process_names():
            lower_name = name.lower()
            is_tray = any(marker in lower_name for marker in self.TRAY_PROCESS_MARKERS)
            if (is_tray or lower_name in self.COMMON_TRAY_APPS) and name not in tray_apps:
                tray_apps.append(name)
        return tray_apps

    def _camera_active(self) -> bool:
        if self.find_process(self.CAMERA_PROCESSES) is not None:
            return True
        # Browser-based meetings only hold the camera while the meeting tab is focused
        title = self._active_window_title().lower()
        return any(marker in title for marker in self.MEETING_WINDOW_MARKERS)

    def _screen_sharing(self) -> bool:
        title = self._active_window_title().lower()
        if any(marker in title for marker in self.SHARING_WINDOW_MARKERS):
            return True
        return super()._screen_sharing()

    def _user_active(self) -> bool:
        # tick counts wrap every 49.7 days
        idle_ms = (win32api.GetTickCount() - win32api.GetLastInputInfo()) & 0xFFFFFFFF
        return idle_ms < Config.USER_IDLE_SECONDS * 1000

    def _device_identifier(self) -> str:
        output = self.run_command(["wmic", "csproduct", "get", "UUID"])
        for line in output.splitlines():
            line = line.strip()
            if line and line.upper() != "UUID":
                return line
        # wmic is deprecated on recent builds
        logger.debug("wmic returned no UUID, using host fingerprint")
        material = f"{os.environ.get('COMPUTERNAME', '')}-{os.environ.get('USERNAME', '')}"
        return hashlib.sha256(material.encode('utf-8')).hexdigest() if material != "-" else ""

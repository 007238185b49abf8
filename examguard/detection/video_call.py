"""
Video call application monitoring.
"""

from typing import Optional, Set

from ..core.base import BaseDetector
from ..utils.process_utils import ProcessUtils


class VideoCallDetector(BaseDetector):
    """
    Tracks which video-call applications run and which one is the primary
    (the call the session is expected to happen in).

    The primary is the alphabetically first app when one has to be chosen.
    A second app next to the primary raises ALERT_ADDITIONAL_VIDEO_APP;
    camera or microphone use with no known app raises ALERT_UNKNOWN_MEDIA_USE
    once per occurrence.
    """

    name = "video_call"

    def __init__(self, configuration, provider, publish=None):
        super().__init__(configuration, provider, publish)
        self.active_apps: Set[str] = set()
        self.primary_app: Optional[str] = None
        self.unknown_media_active = False

    def _current_apps(self, processes) -> Set[str]:
        apps = set()
        for process in processes:
            lower_name = process.lower()
            if ProcessUtils.first_match(lower_name, self.config.video_call_applications):
                apps.add(lower_name)
        return apps

    def _detect(self) -> None:
        processes = self.snapshot('running_processes')
        if processes is None:
            return
        camera = bool(self.snapshot('camera_active'))
        microphone = bool(self.snapshot('microphone_active'))
        self.debug("Camera active: %s, microphone active: %s", camera, microphone)

        current_apps = self._current_apps(processes)
        previous_apps = set(self.active_apps)

        unknown_media = (camera or microphone) and not current_apps
        if unknown_media and not self.unknown_media_active:
            self.emit("ALERT_UNKNOWN_MEDIA_USE",
                      "Camera or microphone active without recognized video application")
        self.unknown_media_active = unknown_media

        if self.primary_app is None and current_apps:
            self.primary_app = min(current_apps)
            self.emit("INFO_PRIMARY_VIDEO_APP", f"Primary video application detected: {self.primary_app}")

        if len(current_apps) > 1 and current_apps != previous_apps:
            self.emit("ALERT_MULTIPLE_VIDEO_APPS",
                      f"Multiple video applications detected: {', '.join(sorted(current_apps))}")

        for app in sorted(current_apps - previous_apps):
            self.active_apps.add(app)
            if self.primary_app is not None and app != self.primary_app:
                self.emit("ALERT_ADDITIONAL_VIDEO_APP", f"Additional video application detected: {app}")
            else:
                self.emit("INFO_VIDEO_APP_STARTED", f"Video application started: {app}")

        for app in sorted(previous_apps - current_apps):
            self.active_apps.discard(app)
            self.emit("INFO_VIDEO_APP_CLOSED", f"Video application closed: {app}")
            if app == self.primary_app:
                self.primary_app = min(current_apps) if current_apps else None
                if self.primary_app is not None:
                    self.emit("INFO_PRIMARY_VIDEO_APP", f"New primary video application: {self.primary_app}")

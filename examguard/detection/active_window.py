"""
Foreground window monitoring.
"""

from ..core.base import BaseDetector
from ..utils.process_utils import ProcessUtils


class ActiveWindowDetector(BaseDetector):
    """Flags coding platforms, video apps and suspicious tools in the focused window title."""

    name = "active_window"

    def __init__(self, configuration, provider, publish=None):
        super().__init__(configuration, provider, publish)
        self.last_window = None

    def _detect(self) -> None:
        title = self.snapshot('active_window_title')
        if not title or title == self.last_window:
            return

        self.last_window = title
        self.debug("Active window: %s", title)

        platform_id = ProcessUtils.first_match(title, self.config.platform_identifiers)
        if platform_id:
            self.emit("ALERT_CODING_PLATFORM",
                      f"Detected coding platform: {platform_id} in window: {title}")

        video_app = ProcessUtils.first_match(title, self.config.video_call_applications)
        if video_app:
            self.emit("INFO_VIDEO_APP", f"Detected video app: {video_app} in window: {title}")

        suspicious = ProcessUtils.first_match(title, self.config.suspicious_processes)
        if suspicious:
            self.emit("ALERT_SUSPICIOUS_WINDOW",
                      f"Detected suspicious window: {suspicious} in window: {title}")

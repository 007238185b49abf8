"""
Clipboard activity monitoring.
"""

from ..core.base import PollingDetector
from ..core.config import Config
from ..utils.security_utils import SecurityUtils


class ClipboardMonitor(PollingDetector):
    """
    Watches the clipboard on its own one-second loop.

    Content is remembered only as a SHA-256 digest so copied text never stays
    in memory longer than one tick.
    """

    name = "clipboard"
    interval = Config.CLIPBOARD_CHECK_INTERVAL

    def __init__(self, configuration, provider, publish=None, interval=None):
        super().__init__(configuration, provider, publish, interval)
        self.reset()

    def reset(self) -> None:
        self.last_content_hash = None
        self.activity_count = 0

    def _detect(self) -> None:
        content = self.snapshot('clipboard_text')
        if not content:
            return

        content_hash = SecurityUtils.calculate_sha256(content)
        if content_hash == self.last_content_hash:
            return

        self.last_content_hash = content_hash
        self.activity_count += 1
        self.debug("Clipboard changed: %s", SecurityUtils.preview(content))

        if self.activity_count > Config.CLIPBOARD_FREQUENCY_THRESHOLD:
            self.emit("ALERT_CLIPBOARD_FREQUENCY",
                      f"High clipboard activity detected: {self.activity_count} changes in a short period")
            self.activity_count = 0

        if SecurityUtils.is_likely_code(content):
            self.emit("ALERT_CLIPBOARD_CODE", "Code-like content detected in clipboard")

        if len(content) > Config.CLIPBOARD_LARGE_CONTENT_LENGTH:
            self.emit("INFO_CLIPBOARD_LARGE",
                      f"Large content copied to clipboard: {len(content)} characters")

    def get_status(self):
        status = super().get_status()
        status['activity_count'] = self.activity_count
        return status

"""
Screen sharing monitoring.
"""

from ..core.base import BaseDetector
from ..utils.process_utils import ProcessUtils


class ScreenShareDetector(BaseDetector):
    """Tracks the screen-sharing flag and checks which application is sharing."""

    name = "screen_share"

    def __init__(self, configuration, provider, publish=None):
        super().__init__(configuration, provider, publish)
        self.was_sharing = False
        self.last_sharing_app = None

    def is_authorized_app(self, sharing_app: str) -> bool:
        """Sharing is expected only through a configured video-call application."""
        if not sharing_app:
            return False
        return ProcessUtils.first_match(sharing_app, self.config.video_call_applications) is not None

    def _detect(self) -> None:
        sharing = self.snapshot('screen_sharing')
        if sharing is None:
            return

        self.debug("Screen sharing status: %s", sharing)

        if not sharing:
            if self.was_sharing:
                self.emit("INFO_SCREEN_SHARING_STOPPED", "Screen sharing stopped")
                self.was_sharing = False
                self.last_sharing_app = None
            return

        started = not self.was_sharing
        if started:
            self.emit("ALERT_SCREEN_SHARING_STARTED", "Screen sharing detected")
            self.was_sharing = True

        sharing_app = self.snapshot('screen_sharing_app')
        if sharing_app is None:
            # app unknown this tick; checked again on the next good sample
            return
        if sharing_app == self.last_sharing_app:
            return
        self.last_sharing_app = sharing_app

        if sharing_app:
            self.emit("INFO_SCREEN_SHARING_APP", f"Screen sharing application: {sharing_app}")
        if not self.is_authorized_app(sharing_app):
            self.emit("ALERT_UNAUTHORIZED_SHARING",
                      "Screen is being shared with an unauthorized application")

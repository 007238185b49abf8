"""
Browser and tab count monitoring.
"""

from typing import Dict

from ..core.base import PollingDetector
from ..core.config import Config


class BrowserMonitor(PollingDetector):
    """
    Compares the provider's per-browser tab estimates against the previous
    tick. Only rises are reported; closing tabs or browsers is silent.
    """

    name = "browser"
    interval = Config.BROWSER_CHECK_INTERVAL

    def __init__(self, configuration, provider, publish=None, interval=None):
        super().__init__(configuration, provider, publish, interval)
        self.reset()

    def reset(self) -> None:
        self.last_tab_counts: Dict[str, int] = {}
        self.last_total_tabs = 0
        self.last_browser_count = 0

    def _detect(self) -> None:
        tab_counts = self.snapshot('browser_tab_counts')
        if tab_counts is None:
            return

        tab_counts = dict(tab_counts)
        total_tabs = sum(tab_counts.values())
        browser_count = len(tab_counts)
        self.debug("Browser count: %d, total tab count: %d", browser_count, total_tabs)

        if total_tabs > self.last_total_tabs and total_tabs > Config.BROWSER_TAB_THRESHOLD:
            self.emit("INFO_BROWSER_TABS", f"High browser tab count detected: {total_tabs} tabs")

        if browser_count > self.last_browser_count and browser_count > Config.BROWSER_COUNT_THRESHOLD:
            self.emit("ALERT_MULTIPLE_BROWSERS",
                      f"Multiple browser instances detected: {browser_count} browsers")
            listing = ", ".join(f"{browser} ({count} tabs)" for browser, count in tab_counts.items())
            self.emit("INFO_BROWSER_LIST", f"Active browsers: {listing}")

        for browser, count in tab_counts.items():
            previous = self.last_tab_counts.get(browser, 0)
            if count > previous and count > Config.BROWSER_EXCESSIVE_TAB_THRESHOLD:
                self.emit("ALERT_EXCESSIVE_TABS", f"{browser} has {count} tabs open")

        self.last_tab_counts = tab_counts
        self.last_total_tabs = total_tabs
        self.last_browser_count = browser_count

# Configuration settings for the exam monitoring agent
from pathlib import Path


class Config:
    """Tunable constants shared by every monitoring session."""

    # Scheduling
    DEFAULT_SCAN_INTERVAL_MS = 5000
    DEVICE_SWITCH_INTERVAL_MULTIPLIER = 2  # device checks run less often
    CLIPBOARD_CHECK_INTERVAL = 1.0  # seconds
    BROWSER_CHECK_INTERVAL = 5.0  # seconds
    SCHEDULER_POOL_SIZE = 3
    SHUTDOWN_GRACE_PERIOD = 5.0  # seconds before forced cancellation
    DISPATCHER_POLL_INTERVAL = 0.5  # seconds

    # Clipboard heuristics
    CLIPBOARD_FREQUENCY_THRESHOLD = 5  # changes before a frequency alert
    CLIPBOARD_LARGE_CONTENT_LENGTH = 500  # characters
    CLIPBOARD_PREVIEW_LENGTH = 50

    # Browser heuristics
    BROWSER_TAB_THRESHOLD = 5
    BROWSER_EXCESSIVE_TAB_THRESHOLD = 10
    BROWSER_COUNT_THRESHOLD = 1

    # Device switch heuristics
    INACTIVITY_THRESHOLD = 3  # idle->active occurrences before an alert
    INACTIVITY_TIME_SECONDS = 120
    USER_IDLE_SECONDS = 30  # provider considers the user idle after this

    # Provider sampling
    SUBPROCESS_TIMEOUT = 2.0  # seconds

    # Logging settings
    LOGS_DIR = "logs"
    LOG_DATE_FORMAT = "%Y-%m-%d"
    LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    LOG_VALUE_MAX_LENGTH = 100
    SECURITY_LOG_ENABLED = True

    # Default classification lists
    DEFAULT_SUSPICIOUS_PROCESSES = [
        'chatgpt', 'copilot', 'virtualbox', 'vmware', 'anydesk', 'teamviewer'
    ]

    DEFAULT_PLATFORM_IDENTIFIERS = [
        'leetcode', 'hackerrank', 'codility', 'codesignal', 'hackerearth',
        'topcoder', 'codeforces'
    ]

    DEFAULT_VIDEO_CALL_APPLICATIONS = [
        'zoom', 'teams', 'webex', 'meet', 'skype', 'discord'
    ]

    # Event namespaces
    ALERT_PREFIX = "ALERT_"
    INFO_PREFIX = "INFO_"

    @classmethod
    def ensure_directories(cls):
        """Ensure required directories exist."""
        Path(cls.LOGS_DIR).mkdir(parents=True, exist_ok=True)

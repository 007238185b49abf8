"""
Exception types raised by the monitoring agent.
"""


class ExamGuardError(Exception):
    """Base class for all agent errors."""


class UnsupportedPlatformError(ExamGuardError):
    """Raised when no capability provider exists for the host OS."""

    def __init__(self, platform_name: str):
        super().__init__(f"Unsupported platform: {platform_name}")
        self.platform_name = platform_name


class ConfigurationError(ExamGuardError, ValueError):
    """Raised for invalid configuration values or unknown options."""

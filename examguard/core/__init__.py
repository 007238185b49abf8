"""
Core module initialization.
"""

from .config import Config
from .configuration import Configuration, ConfigurationBuilder
from .exceptions import ExamGuardError, UnsupportedPlatformError, ConfigurationError
from .base import BaseDetector, BaseMonitor, EventSink, PollingDetector, SecurityEvent

__all__ = [
    'Config',
    'Configuration',
    'ConfigurationBuilder',
    'ExamGuardError',
    'UnsupportedPlatformError',
    'ConfigurationError',
    'BaseDetector',
    'BaseMonitor',
    'EventSink',
    'PollingDetector',
    'SecurityEvent'
]

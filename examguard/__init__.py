"""
ExamGuard Package

A host-based monitoring agent for proctored exams and interviews. It samples
operating system state (focused window, processes, clipboard, tray icons,
camera/microphone/screen-share status, browser tabs, device identity) and
raises typed alerts when patterns associated with cheating appear.

Components:
- core: Configuration, tunable constants and detector base classes
- providers: OS-specific sampling behind one capability interface
- detection: The eight detectors, scheduler and detection manager
- security: Alert fan-out, monitoring sessions and the session registry
- utils: Audit logging, hashing and process classification helpers
"""

__version__ = "1.0.0"
__author__ = "Security Team"

# security before detection: the session layer pulls the detection package in
from .core import Config, Configuration, ConfigurationBuilder, SecurityEvent
from .core.exceptions import ExamGuardError, UnsupportedPlatformError, ConfigurationError
from .security import AlertSystem, MonitoringSession, SessionManager
from .detection import DetectionManager
from .providers import CapabilityProvider, ProviderFactory, SampleResult

__all__ = [
    'Config',
    'Configuration',
    'ConfigurationBuilder',
    'SecurityEvent',
    'ExamGuardError',
    'UnsupportedPlatformError',
    'ConfigurationError',
    'AlertSystem',
    'MonitoringSession',
    'SessionManager',
    'DetectionManager',
    'CapabilityProvider',
    'ProviderFactory',
    'SampleResult'
]

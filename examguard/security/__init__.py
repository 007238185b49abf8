"""
Security module initialization.
"""

from .alert_system import AlertSystem, AlertCallback, EventListener
from .monitoring_session import MonitoringSession
from .session_manager import SessionManager

__all__ = [
    'AlertSystem',
    'AlertCallback',
    'EventListener',
    'MonitoringSession',
    'SessionManager'
]

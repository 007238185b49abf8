"""
Session registry: the host application's entry point.
"""

import logging
import threading
from typing import Dict, Optional

from ..core.configuration import Configuration
from ..providers.factory import ProviderFactory
from .alert_system import AlertCallback
from .monitoring_session import MonitoringSession

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Maps opaque session ids to independent MonitoringSessions.

    Hosts own their SessionManager; nothing is shared between two managers.
    Operations on an unknown id log an error and return False (or None).
    """

    def __init__(self, provider_factory: ProviderFactory = None):
        self.provider_factory = provider_factory or ProviderFactory()
        self._sessions: Dict[str, MonitoringSession] = {}
        self._lock = threading.Lock()

    def _get(self, session_id: str) -> Optional[MonitoringSession]:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            logger.error("Invalid instance ID: %s", session_id)
        return session

    def create_instance(self, configuration: Configuration) -> str:
        session = MonitoringSession(configuration, self.provider_factory)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Created monitoring instance with ID: %s", session.session_id)
        return session.session_id

    def get_session(self, session_id: str) -> Optional[MonitoringSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def start_monitoring(self, session_id: str) -> bool:
        session = self._get(session_id)
        if session is None:
            return False
        session.start()
        logger.info("Started monitoring for instance: %s", session_id)
        return True

    def stop_monitoring(self, session_id: str) -> bool:
        session = self._get(session_id)
        if session is None:
            return False
        session.stop()
        logger.info("Stopped monitoring for instance: %s", session_id)
        return True

    def register_alert_callback(self, session_id: str, callback: AlertCallback) -> bool:
        session = self._get(session_id)
        if session is None:
            return False
        session.register_alert_callback(callback)
        return True

    def unregister_alert_callback(self, session_id: str, callback: AlertCallback) -> bool:
        session = self._get(session_id)
        if session is None:
            return False
        session.unregister_alert_callback(callback)
        return True

    def release_instance(self, session_id: str) -> bool:
        """Stop the session if running, free its provider and forget the id."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            logger.error("Invalid instance ID: %s", session_id)
            return False
        session.shutdown()
        logger.info("Released monitoring instance: %s", session_id)
        return True

    def is_monitoring(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        return session is not None and session.is_running()

    def get_instance_configuration(self, session_id: str) -> Optional[Configuration]:
        session = self.get_session(session_id)
        return session.get_configuration() if session is not None else None

    def get_all_instances(self) -> Dict[str, bool]:
        with self._lock:
            sessions = dict(self._sessions)
        return {session_id: session.is_running() for session_id, session in sessions.items()}

    def release_all_instances(self) -> None:
        with self._lock:
            session_ids = list(self._sessions)
        for session_id in session_ids:
            self.release_instance(session_id)
        logger.info("Released all monitoring instances")

    @staticmethod
    def set_detailed_logging(enabled: bool) -> None:
        """Toggle DEBUG output for the whole examguard logger tree."""
        logging.getLogger("examguard").setLevel(logging.DEBUG if enabled else logging.INFO)
        logger.info("Detailed logging %s", "enabled" if enabled else "disabled")

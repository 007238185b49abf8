"""
A single monitored session.
"""

import logging
import threading
import uuid
from typing import Optional

from ..core.config import Config
from ..core.configuration import Configuration
from ..detection.detection_manager import DetectionManager
from ..providers.factory import ProviderFactory
from ..utils.security_utils import SecurityUtils
from .alert_system import AlertCallback, AlertSystem

logger = logging.getLogger(__name__)


class MonitoringSession:
    """
    Owns one DetectionManager (and through it one provider and one
    AlertSystem) plus the running flag.

    ``start`` returns immediately; provider resolution and detector start-up
    happen on a worker thread. If that fails the session stops itself.
    """

    def __init__(self, configuration: Configuration, provider_factory: ProviderFactory = None,
                 session_id: str = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.config = configuration
        self.alert_system = AlertSystem()
        self.manager = DetectionManager(configuration, provider_factory, self.alert_system)
        self.running = False
        self.start_error: Optional[BaseException] = None
        self._starting = False
        self._stop_requested = False
        self._started = threading.Event()
        self._start_thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        self.manager.register_event_listener(self._log_event)

    def _log_event(self, event_type: str, details: str) -> None:
        logger.info("Event detected: %s - %s", event_type, SecurityUtils.sanitize_for_logging(details))

    def start(self) -> bool:
        """Begin monitoring in the background; False if already running or starting."""
        with self._lock:
            if self.running or self._starting:
                logger.warning("Session %s is already running", self.session_id)
                return False
            self._starting = True
            self._stop_requested = False
            self.start_error = None
            self._started = threading.Event()
            self._start_thread = threading.Thread(target=self._start_worker,
                                                  name=f"examguard-start-{self.session_id[:8]}",
                                                  daemon=True)
            self._start_thread.start()
        logger.info("Starting session %s...", self.session_id)
        return True

    def _start_worker(self) -> None:
        try:
            self.manager.initialize_detectors()
            self.manager.start_detection()
        except Exception as e:
            logger.exception("Failed to start session %s", self.session_id)
            SecurityUtils.log_security_event("SESSION_START_FAILED", f"{self.session_id}: {e}")
            self.start_error = e
            with self._lock:
                self._starting = False
            self.stop()
            self._started.set()
            return

        with self._lock:
            self._starting = False
            abort = self._stop_requested
            if not abort:
                self.running = True
        if abort:
            # stop() arrived while we were starting up
            self.manager.stop_detection()
        else:
            logger.info("Session %s started successfully", self.session_id)
            SecurityUtils.log_security_event("SESSION_STARTED", self.session_id)
        self._started.set()

    def wait_until_started(self, timeout: float = None) -> bool:
        """Block until the background start finishes; True if the session is running."""
        self._started.wait(timeout)
        return self.running

    def stop(self) -> bool:
        """Stop monitoring; returns whether the session had been running."""
        with self._lock:
            was_running = self.running
            self.running = False
            if self._starting:
                self._stop_requested = True
        if not was_running:
            logger.warning("Session %s is not running", self.session_id)

        logger.info("Stopping session %s...", self.session_id)
        try:
            self.manager.stop_detection()
        except Exception:
            logger.exception("Error stopping session %s", self.session_id)
        if was_running:
            SecurityUtils.log_security_event("SESSION_STOPPED", self.session_id)
        return was_running

    def shutdown(self) -> None:
        """Stop monitoring, free the provider and drop every registered callback."""
        self.stop()
        thread = self._start_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(Config.SHUTDOWN_GRACE_PERIOD)
        self.manager.release()
        self.alert_system.clear()
        logger.info("Session %s shutdown complete", self.session_id)

    def register_alert_callback(self, callback: AlertCallback) -> bool:
        registered = self.alert_system.register_alert_callback(callback)
        if registered:
            logger.info("Alert callback registered")
        return registered

    def unregister_alert_callback(self, callback: AlertCallback) -> bool:
        removed = self.alert_system.unregister_alert_callback(callback)
        if removed:
            logger.info("Alert callback unregistered")
        return removed

    def get_configuration(self) -> Configuration:
        return self.config

    def is_running(self) -> bool:
        return self.running

    def get_status(self):
        status = self.manager.get_status()
        status['session_id'] = self.session_id
        status['running'] = self.running
        return status

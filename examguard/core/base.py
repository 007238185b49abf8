"""
Base classes and interfaces for the monitoring agent.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .config import Config
from .configuration import Configuration

logger = logging.getLogger(__name__)


class SecurityEvent:
    """Represents a (type, details) event raised by a detector."""

    def __init__(self, event_type: str, details: str, timestamp: datetime = None,
                 source: str = None):
        self.event_type = event_type
        self.details = details
        self.timestamp = timestamp or datetime.now()
        self.source = source

    @property
    def is_alert(self) -> bool:
        """Alerts live in the ALERT_ namespace; everything else is informational."""
        return self.event_type.startswith(Config.ALERT_PREFIX)

    @property
    def alert_type(self) -> Optional[str]:
        """Alert category with the namespace marker stripped, or None for INFO events."""
        if not self.is_alert:
            return None
        return self.event_type[len(Config.ALERT_PREFIX):]

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            'event_type': self.event_type,
            'details': self.details,
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
        }

    def __eq__(self, other):
        if not isinstance(other, SecurityEvent):
            return NotImplemented
        return (self.event_type, self.details) == (other.event_type, other.details)

    def __hash__(self):
        return hash((self.event_type, self.details))

    def __repr__(self) -> str:
        return f"SecurityEvent({self.event_type!r}, {self.details!r})"

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.event_type} - {self.details}"


EventSink = Callable[[SecurityEvent], None]


class BaseDetector(ABC):
    """
    Abstract base class for all detectors.

    Subclasses implement ``_detect``: take a snapshot from the provider, diff it
    against remembered state and call ``emit`` for each transition. ``detect``
    wraps that so a failing sample never escapes into the scheduler.
    """

    name = "detector"

    def __init__(self, configuration: Configuration, provider, publish: Optional[EventSink] = None):
        self.config = configuration
        self.provider = provider
        self.publish = publish
        self._pending: List[SecurityEvent] = []

    def detect(self) -> List[SecurityEvent]:
        """Run one tick and return the events emitted during it."""
        self._pending = []
        try:
            self._detect()
        except Exception:
            logger.exception("Error in %s detector", self.name)
        emitted, self._pending = self._pending, []
        return emitted

    @abstractmethod
    def _detect(self) -> None:
        """Sample, diff and emit. May raise; ``detect`` absorbs it."""
        pass

    def snapshot(self, capability: str) -> Any:
        """Provider value for this tick, or None when sampling failed."""
        result = self.provider.sample(capability)
        if not result.ok:
            self.debug("No %s sample this tick: %s", capability, result.error)
            return None
        return result.value

    def emit(self, event_type: str, details: str) -> None:
        """Record an event for this tick and post it to the sink."""
        event = SecurityEvent(event_type, details, source=self.name)
        self._pending.append(event)
        if self.publish is not None:
            try:
                self.publish(event)
            except Exception:
                logger.exception("Failed to publish %s from %s detector", event_type, self.name)

    def debug(self, message: str, *args) -> None:
        """Per-tick trace, only when detailed logging is switched on."""
        if self.config.detailed_logging:
            logger.debug("[%s] " + message, self.name, *args)


class BaseMonitor(ABC):
    """Abstract base class for components that run their own monitoring loop."""

    @abstractmethod
    def start_monitoring(self) -> None:
        """Start the monitoring process."""
        pass

    @abstractmethod
    def stop_monitoring(self) -> None:
        """Stop the monitoring process."""
        pass

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Get current monitoring status."""
        pass


class PollingDetector(BaseDetector, BaseMonitor):
    """
    Detector that drives itself on a fixed cadence from a daemon thread
    instead of being ticked by the scheduler.
    """

    interval = 1.0  # seconds between ticks

    def __init__(self, configuration: Configuration, provider, publish: Optional[EventSink] = None,
                 interval: float = None):
        super().__init__(configuration, provider, publish)
        if interval is not None:
            self.interval = interval
        self.monitoring_active = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Forget remembered state before a new monitoring run."""
        pass

    def start_monitoring(self) -> None:
        with self._lock:
            if self.monitoring_active:
                logger.warning("%s monitoring already running", self.name)
                return
            self.monitoring_active = True
            self._stop_event = threading.Event()
            self.reset()
            self._thread = threading.Thread(target=self.monitoring_loop, args=(self._stop_event,),
                                            name=f"examguard-{self.name}", daemon=True)
            self._thread.start()
        logger.info("Started %s monitoring every %.1fs", self.name, self.interval)

    def stop_monitoring(self, timeout: float = None) -> None:
        with self._lock:
            if not self.monitoring_active:
                return
            self.monitoring_active = False
            self._stop_event.set()
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(Config.SHUTDOWN_GRACE_PERIOD if timeout is None else timeout)
            if thread.is_alive():
                # Daemon thread; abandoned until its current tick returns
                logger.warning("%s loop did not stop within the grace period", self.name)
        logger.info("Stopped %s monitoring", self.name)

    def monitoring_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self.detect()
            stop_event.wait(self.interval)

    def get_status(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'monitoring_active': self.monitoring_active,
            'interval': self.interval,
        }

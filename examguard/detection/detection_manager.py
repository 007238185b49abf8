"""
Detection manager: owns the provider and the enabled detectors, runs them on
their cadence and drains their events into the alert system.
"""

import logging
import queue
import threading
import time
from typing import Any, Dict, List, Optional

from ..core.base import BaseDetector, PollingDetector, SecurityEvent
from ..core.config import Config
from ..core.configuration import Configuration
from ..providers.base import CapabilityProvider
from ..providers.factory import ProviderFactory
from ..security.alert_system import AlertSystem, EventListener
from .active_window import ActiveWindowDetector
from .browser_monitor import BrowserMonitor
from .clipboard_monitor import ClipboardMonitor
from .device_switch import DeviceSwitchDetector
from .process_monitor import ProcessMonitor
from .scheduler import Scheduler
from .screen_share import ScreenShareDetector
from .system_tray import SystemTrayMonitor
from .video_call import VideoCallDetector

logger = logging.getLogger(__name__)


def _remaining(deadline: float) -> float:
    return max(0.0, deadline - time.monotonic())


# Detector name -> (class, interval multiplier of the scan interval)
# A multiplier of None means the detector runs its own loop.
DETECTORS = {
    'active_window': (ActiveWindowDetector, 1),
    'browser': (BrowserMonitor, None),
    'clipboard': (ClipboardMonitor, None),
    'device_switch': (DeviceSwitchDetector, Config.DEVICE_SWITCH_INTERVAL_MULTIPLIER),
    'process': (ProcessMonitor, 1),
    'screen_share': (ScreenShareDetector, 1),
    'system_tray': (SystemTrayMonitor, 1),
    'video_call': (VideoCallDetector, 1),
}


class DetectionManager:
    """
    Runs one session's detectors.

    Detectors publish events onto ``self.events``; a dispatcher thread drains
    the queue into the ``AlertSystem`` so detector ticks never wait on
    listener code.
    """

    def __init__(self, configuration: Configuration, provider_factory: ProviderFactory = None,
                 alert_system: AlertSystem = None):
        self.config = configuration
        self.provider_factory = provider_factory or ProviderFactory()
        self.alert_system = alert_system or AlertSystem()
        self.provider: Optional[CapabilityProvider] = None
        self.detectors: Dict[str, BaseDetector] = {}
        self.events: "queue.Queue[SecurityEvent]" = queue.Queue()
        self.detection_active = False
        self._scheduler: Optional[Scheduler] = None
        self._dispatcher: Optional[threading.Thread] = None
        self._dispatcher_stop = threading.Event()
        self._lock = threading.RLock()

    def register_event_listener(self, listener: EventListener) -> bool:
        return self.alert_system.register_event_listener(listener)

    def unregister_event_listener(self, listener: EventListener) -> bool:
        return self.alert_system.unregister_event_listener(listener)

    def publish(self, event: SecurityEvent) -> None:
        """Event sink handed to every detector."""
        self.events.put(event)

    def initialize_detectors(self) -> None:
        """
        Resolve the provider and build the enabled detectors with fresh state.

        Raises UnsupportedPlatformError when no provider exists for this OS.
        """
        with self._lock:
            if self.provider is None:
                logger.info("Initializing capability provider...")
                self.provider = self.provider_factory.create()
                logger.info("Detected platform: %s", self.provider.platform_name)

            self.detectors = {}
            for name in self.config.enabled_detectors():
                detector_class, _ = DETECTORS[name]
                self.detectors[name] = detector_class(self.config, self.provider, self.publish)
                logger.info("%s initialized", detector_class.__name__)

    def start_detection(self) -> None:
        with self._lock:
            if self.detection_active:
                logger.warning("Detection already running")
                return
            if self.provider is None:
                self.initialize_detectors()

            logger.info("Starting detection modules...")
            self._start_dispatcher()
            # Set before anything else starts so a failed start can still be stopped
            self.detection_active = True
            self._scheduler = Scheduler(Config.SCHEDULER_POOL_SIZE)
            for name, detector in self.detectors.items():
                _, multiplier = DETECTORS[name]
                if multiplier is None:
                    detector.start_monitoring()
                else:
                    self._scheduler.schedule(name, detector.detect,
                                             self.config.scan_interval * multiplier, initial_delay=0)
            self._scheduler.start()
            logger.info("All enabled detection modules started")

    def stop_detection(self) -> bool:
        """
        Stop every loop within one shared grace period.

        Returns False when a tick had to be abandoned after the grace period.
        May be called from a listener running on the dispatcher thread.
        """
        with self._lock:
            if not self.detection_active:
                return True
            logger.info("Stopping detection modules...")
            deadline = time.monotonic() + Config.SHUTDOWN_GRACE_PERIOD
            clean = True
            try:
                for detector in self._polling_detectors():
                    detector.stop_monitoring(_remaining(deadline))

                scheduler, self._scheduler = self._scheduler, None
                if scheduler is not None:
                    clean = scheduler.shutdown(_remaining(deadline))
                    if not clean:
                        logger.warning("Forced cancellation of detection tasks after %.0fs",
                                       Config.SHUTDOWN_GRACE_PERIOD)

                self._stop_dispatcher(_remaining(deadline))
            finally:
                self.detection_active = False
            logger.info("All detection modules stopped")
            return clean

    def release(self) -> None:
        """Stop detection and hand the provider back to its factory."""
        with self._lock:
            self.stop_detection()
            provider, self.provider = self.provider, None
            self.detectors = {}
        if provider is not None:
            self.provider_factory.release(provider)

    def _polling_detectors(self) -> List[PollingDetector]:
        return [d for d in self.detectors.values() if isinstance(d, PollingDetector)]

    def drain(self) -> int:
        """Dispatch every queued event on the calling thread."""
        count = 0
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                return count
            self.alert_system.dispatch(event)
            count += 1

    def _start_dispatcher(self) -> None:
        self._dispatcher_stop = threading.Event()
        self._dispatcher = threading.Thread(target=self._dispatch_loop, args=(self._dispatcher_stop,),
                                            name="examguard-dispatcher", daemon=True)
        self._dispatcher.start()

    def _stop_dispatcher(self, timeout: float) -> None:
        self._dispatcher_stop.set()
        dispatcher, self._dispatcher = self._dispatcher, None
        if dispatcher is not None and dispatcher is not threading.current_thread():
            dispatcher.join(timeout)
        # Events published by the last ticks
        self.drain()

    def _dispatch_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                event = self.events.get(timeout=Config.DISPATCHER_POLL_INTERVAL)
            except queue.Empty:
                continue
            self.alert_system.dispatch(event)

    def get_status(self) -> Dict[str, Any]:
        return {
            'detection_active': self.detection_active,
            'platform': self.provider.platform_name if self.provider else None,
            'detectors': list(self.detectors),
            'queued_events': self.events.qsize(),
            'alerts': self.alert_system.get_status(),
        }

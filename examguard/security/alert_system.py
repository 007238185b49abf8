"""
Alert system: fans detection events out to listeners and alert callbacks.
"""

import logging
import threading
from typing import Any, Callable, Dict, List

from ..core.base import SecurityEvent
from ..utils.security_utils import SecurityUtils

logger = logging.getLogger(__name__)

EventListener = Callable[[str, str], None]
AlertCallback = Callable[[str, str], None]


class AlertSystem:
    """
    Delivers every event to the registered event listeners and ALERT_ events
    to the alert callbacks, with the ALERT_ prefix stripped from the type.

    Registration may happen while events are being delivered; delivery
    iterates over a snapshot. A listener that raises is logged and skipped.
    """

    def __init__(self, audit_alerts: bool = True):
        self.audit_alerts = audit_alerts
        self._event_listeners: List[EventListener] = []
        self._alert_callbacks: List[AlertCallback] = []
        self._lock = threading.Lock()
        self.events_dispatched = 0
        self.alerts_raised = 0

    def _register(self, registry: list, listener) -> bool:
        if listener is None:
            return False
        with self._lock:
            if listener in registry:
                return False
            registry.append(listener)
        return True

    def _unregister(self, registry: list, listener) -> bool:
        with self._lock:
            try:
                registry.remove(listener)
            except ValueError:
                return False
        return True

    def register_event_listener(self, listener: EventListener) -> bool:
        return self._register(self._event_listeners, listener)

    def unregister_event_listener(self, listener: EventListener) -> bool:
        return self._unregister(self._event_listeners, listener)

    def register_alert_callback(self, callback: AlertCallback) -> bool:
        return self._register(self._alert_callbacks, callback)

    def unregister_alert_callback(self, callback: AlertCallback) -> bool:
        return self._unregister(self._alert_callbacks, callback)

    def clear(self) -> None:
        with self._lock:
            self._event_listeners.clear()
            self._alert_callbacks.clear()

    def dispatch(self, event: SecurityEvent) -> None:
        """Deliver one event to every interested party."""
        with self._lock:
            listeners = list(self._event_listeners)
            callbacks = list(self._alert_callbacks) if event.is_alert else []
        self.events_dispatched += 1

        for listener in listeners:
            try:
                listener(event.event_type, event.details)
            except Exception:
                logger.exception("Error in event listener for %s", event.event_type)

        if not event.is_alert:
            return

        self.alerts_raised += 1
        if self.audit_alerts:
            SecurityUtils.log_security_event(event.event_type, event.details)

        for callback in callbacks:
            try:
                callback(event.alert_type, event.details)
            except Exception:
                logger.exception("Error in alert callback for %s", event.alert_type)

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            listener_count = len(self._event_listeners)
            callback_count = len(self._alert_callbacks)
        return {
            'event_listeners': listener_count,
            'alert_callbacks': callback_count,
            'events_dispatched': self.events_dispatched,
            'alerts_raised': self.alerts_raised,
        }

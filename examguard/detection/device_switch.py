"""
Device and network identity monitoring.
"""

import logging
import time
from typing import Callable

from ..core.base import BaseDetector
from ..core.config import Config

logger = logging.getLogger(__name__)


class DeviceSwitchDetector(BaseDetector):
    """
    Detects a candidate moving the session to another machine.

    Two signals: the device identifier or primary MAC address changing, and a
    repeated pattern of long idle stretches followed by activity.
    """

    name = "device_switch"

    def __init__(self, configuration, provider, publish=None, clock: Callable[[], float] = time.time):
        super().__init__(configuration, provider, publish)
        self.clock = clock
        self.last_device_id = ""
        self.last_mac_address = ""
        self.last_activity_time = clock()
        self.inactivity_count = 0

    def _detect(self) -> None:
        device_id = self.snapshot('device_identifier')
        mac_address = self.snapshot('primary_mac_address')
        self.debug("Current device ID: %s", device_id)

        if device_id:
            if not self.last_device_id:
                self.last_device_id = device_id
                logger.info("Device monitoring initialized with ID: %s", device_id)
            elif device_id != self.last_device_id:
                self.emit("ALERT_DEVICE_CHANGED",
                          f"Device identifier changed from {self.last_device_id} to {device_id}")
                self.last_device_id = device_id

        if mac_address:
            if not self.last_mac_address:
                self.last_mac_address = mac_address
            elif mac_address != self.last_mac_address:
                self.emit("ALERT_NETWORK_CHANGED",
                          f"Network adapter changed from {self.last_mac_address} to {mac_address}")
                self.last_mac_address = mac_address

        if self.snapshot('user_active'):
            now = self.clock()
            if now - self.last_activity_time > Config.INACTIVITY_TIME_SECONDS:
                self.inactivity_count += 1
                self.debug("Activity after %.0fs idle (%d)", now - self.last_activity_time,
                           self.inactivity_count)
                if self.inactivity_count >= Config.INACTIVITY_THRESHOLD:
                    self.emit("ALERT_ACTIVITY_PATTERN",
                              "Suspicious activity pattern detected: long inactivity followed by activity")
                    self.inactivity_count = 0
            self.last_activity_time = now

"""
Capability provider contract.

A provider samples one category of OS state per call. Concrete providers
implement the ``_``-prefixed samplers, which may raise; the public methods wrap
them so a failure is logged and turned into the empty value of the return
type. Detectors therefore never see an exception from a provider.

Several values are heuristics (browser tab counts, tray applications,
camera/microphone and screen-sharing flags are inferred from process lists
and OS utilities). Treat them as possibly-stale estimates, never exact facts.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class SampleResult(NamedTuple):
    """Outcome of one provider query: ``ok`` is False when the sampler failed."""
    value: Any
    ok: bool = True
    error: Optional[str] = None


class CapabilityProvider(ABC):
    """OS-specific sampler exposing a fixed set of state queries."""

    platform_name = "Unknown"

    # sampler name -> value returned when the sampler fails
    EMPTY_VALUES = {
        'active_window_title': "",
        'running_processes': [],
        'tray_applications': [],
        'clipboard_text': "",
        'camera_active': False,
        'microphone_active': False,
        'screen_sharing': False,
        'screen_sharing_app': "",
        'user_active': False,
        'primary_mac_address': "",
        'device_identifier': "",
        'browser_tab_counts': {},
    }

    def __init__(self):
        self._released = False
        self._release_lock = threading.Lock()

    def sample(self, name: str) -> SampleResult:
        """Run sampler ``name`` and report whether it produced data or failed."""
        if name not in self.EMPTY_VALUES:
            raise AttributeError(f"Unknown capability: {name}")
        empty = self.EMPTY_VALUES[name]
        try:
            value = getattr(self, f"_{name}")()
        except Exception as e:
            logger.warning("%s provider failed to sample %s: %s", self.platform_name, name, e)
            return SampleResult(type(empty)(), False, str(e))
        if value is None:
            return SampleResult(type(empty)(), True, None)
        return SampleResult(value, True, None)

    def active_window_title(self) -> str:
        return self.sample('active_window_title').value

    def running_processes(self) -> List[str]:
        return self.sample('running_processes').value

    def tray_applications(self) -> List[str]:
        return self.sample('tray_applications').value

    def clipboard_text(self) -> str:
        return self.sample('clipboard_text').value

    def camera_active(self) -> bool:
        return self.sample('camera_active').value

    def microphone_active(self) -> bool:
        return self.sample('microphone_active').value

    def screen_sharing(self) -> bool:
        return self.sample('screen_sharing').value

    def screen_sharing_app(self) -> str:
        return self.sample('screen_sharing_app').value

    def user_active(self) -> bool:
        return self.sample('user_active').value

    def primary_mac_address(self) -> str:
        return self.sample('primary_mac_address').value

    def device_identifier(self) -> str:
        return self.sample('device_identifier').value

    def browser_tab_counts(self) -> Dict[str, int]:
        return self.sample('browser_tab_counts').value

    def release(self) -> None:
        """Free provider resources. Safe to call more than once."""
        with self._release_lock:
            if self._released:
                return
            self._released = True
        try:
            self._release()
            logger.info("Released %s provider", self.platform_name)
        except Exception as e:
            logger.error("Error releasing %s provider: %s", self.platform_name, e)

    @property
    def released(self) -> bool:
        return self._released

    def _release(self) -> None:
        pass

    @abstractmethod
    def _active_window_title(self) -> str:
        pass

    @abstractmethod
    def _running_processes(self) -> List[str]:
        pass

    @abstractmethod
    def _tray_applications(self) -> List[str]:
        pass

    @abstractmethod
    def _clipboard_text(self) -> str:
        pass

    @abstractmethod
    def _camera_active(self) -> bool:
        pass

    @abstractmethod
    def _microphone_active(self) -> bool:
        pass

    @abstractmethod
    def _screen_sharing(self) -> bool:
        pass

    @abstractmethod
    def _screen_sharing_app(self) -> str:
        pass

    @abstractmethod
    def _user_active(self) -> bool:
        pass

    @abstractmethod
    def _primary_mac_address(self) -> str:
        pass

    @abstractmethod
    def _device_identifier(self) -> str:
        pass

    @abstractmethod
    def _browser_tab_counts(self) -> Dict[str, int]:
        pass

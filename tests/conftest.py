"""
Shared fixtures: an in-memory capability provider and an isolated audit log.
"""

import copy

import pytest

from examguard.core.config import Config
from examguard.core.configuration import Configuration
from examguard.providers.base import CapabilityProvider


class FakeProvider(CapabilityProvider):
    """Provider whose samples are set directly by the test."""

    platform_name = "Fake"

    def __init__(self, **values):
        super().__init__()
        self.values = copy.deepcopy(CapabilityProvider.EMPTY_VALUES)
        self.values.update(values)
        self.failing = set()
        self.release_count = 0

    def set(self, **values):
        self.values.update(values)

    def fail(self, *names):
        self.failing.update(names)

    def recover(self, *names):
        self.failing.difference_update(names)

    def _value(self, name):
        if name in self.failing:
            raise RuntimeError(f"{name} unavailable")
        return self.values[name]

    def _active_window_title(self):
        return self._value('active_window_title')

    def _running_processes(self):
        return list(self._value('running_processes'))

    def _tray_applications(self):
        return list(self._value('tray_applications'))

    def _clipboard_text(self):
        return self._value('clipboard_text')

    def _camera_active(self):
        return self._value('camera_active')

    def _microphone_active(self):
        return self._value('microphone_active')

    def _screen_sharing(self):
        return self._value('screen_sharing')

    def _screen_sharing_app(self):
        return self._value('screen_sharing_app')

    def _user_active(self):
        return self._value('user_active')

    def _primary_mac_address(self):
        return self._value('primary_mac_address')

    def _device_identifier(self):
        return self._value('device_identifier')

    def _browser_tab_counts(self):
        return dict(self._value('browser_tab_counts'))

    def _release(self):
        self.release_count += 1


@pytest.fixture(autouse=True)
def audit_log_dir(tmp_path, monkeypatch):
    """Keep the daily security log out of the working tree."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setattr(Config, 'LOGS_DIR', str(logs_dir))
    return logs_dir


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def configuration():
    return Configuration()

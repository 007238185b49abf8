"""
Test suite for alert fan-out, monitoring sessions and the session registry.
"""

import logging
import time

import pytest
from unittest.mock import Mock, patch

from conftest import FakeProvider
from examguard.core.base import SecurityEvent
from examguard.core.configuration import Configuration
from examguard.core.exceptions import UnsupportedPlatformError
from examguard.providers.factory import ProviderFactory
from examguard.security.alert_system import AlertSystem
from examguard.security.monitoring_session import MonitoringSession
from examguard.security.session_manager import SessionManager


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.mark.unit
class TestAlertSystem:
    """Test cases for AlertSystem."""

    def setup_method(self):
        self.alert_system = AlertSystem()

    def test_alert_reaches_listeners_and_callbacks(self):
        listener = Mock()
        callback = Mock()
        self.alert_system.register_event_listener(listener)
        self.alert_system.register_alert_callback(callback)

        self.alert_system.dispatch(SecurityEvent("ALERT_REMOTE_ACCESS", "anydesk"))

        listener.assert_called_once_with("ALERT_REMOTE_ACCESS", "anydesk")
        callback.assert_called_once_with("REMOTE_ACCESS", "anydesk")

    def test_info_event_skips_callbacks(self):
        listener = Mock()
        callback = Mock()
        self.alert_system.register_event_listener(listener)
        self.alert_system.register_alert_callback(callback)

        self.alert_system.dispatch(SecurityEvent("INFO_NEW_TRAY_APP", "dropbox"))

        listener.assert_called_once_with("INFO_NEW_TRAY_APP", "dropbox")
        callback.assert_not_called()

    def test_failing_listener_is_isolated(self):
        failing = Mock(side_effect=RuntimeError("listener bug"))
        healthy = Mock()
        failing_callback = Mock(side_effect=ValueError("callback bug"))
        healthy_callback = Mock()
        self.alert_system.register_event_listener(failing)
        self.alert_system.register_event_listener(healthy)
        self.alert_system.register_alert_callback(failing_callback)
        self.alert_system.register_alert_callback(healthy_callback)

        self.alert_system.dispatch(SecurityEvent("ALERT_CLIPBOARD_CODE", "code"))

        healthy.assert_called_once()
        healthy_callback.assert_called_once_with("CLIPBOARD_CODE", "code")

    def test_listener_may_unregister_during_delivery(self):
        second = Mock()

        def first(event_type, details):
            self.alert_system.unregister_event_listener(second)

        self.alert_system.register_event_listener(first)
        self.alert_system.register_event_listener(second)

        self.alert_system.dispatch(SecurityEvent("INFO_X", "a"))
        self.alert_system.dispatch(SecurityEvent("INFO_X", "b"))

        second.assert_called_once_with("INFO_X", "a")

    def test_registration_rules(self):
        callback = Mock()

        assert self.alert_system.register_alert_callback(None) is False
        assert self.alert_system.register_alert_callback(callback) is True
        assert self.alert_system.register_alert_callback(callback) is False
        assert self.alert_system.unregister_alert_callback(callback) is True
        assert self.alert_system.unregister_alert_callback(callback) is False

    @patch('examguard.security.alert_system.SecurityUtils')
    def test_alerts_are_audited(self, mock_security_utils):
        self.alert_system.dispatch(SecurityEvent("ALERT_DEVICE_CHANGED", "A to B"))
        self.alert_system.dispatch(SecurityEvent("INFO_BROWSER_TABS", "6 tabs"))

        mock_security_utils.log_security_event.assert_called_once_with("ALERT_DEVICE_CHANGED", "A to B")

    def test_audit_log_file_written(self, audit_log_dir):
        self.alert_system.dispatch(SecurityEvent("ALERT_VIRTUALIZATION", "vmware"))

        log_files = list(audit_log_dir.glob("security_log_*.txt"))
        assert len(log_files) == 1
        assert "ALERT_VIRTUALIZATION" in log_files[0].read_text(encoding='utf-8')

    def test_status(self):
        self.alert_system.register_event_listener(Mock())
        self.alert_system.dispatch(SecurityEvent("ALERT_X", "x"))

        status = self.alert_system.get_status()

        assert status['event_listeners'] == 1
        assert status['alerts_raised'] == 1


@pytest.mark.integration
class TestMonitoringSession:
    """Test cases for MonitoringSession."""

    def setup_method(self):
        self.provider = FakeProvider(running_processes=["teamviewer.exe"])
        self.config = Configuration.builder().set_scan_interval(50).build()
        self.session = MonitoringSession(self.config, ProviderFactory(lambda: self.provider))

    def teardown_method(self):
        self.session.shutdown()

    def test_start_runs_in_background(self):
        assert self.session.start() is True
        assert self.session.wait_until_started(2.0) is True
        assert self.session.is_running() is True

    def test_alert_callback_receives_stripped_type(self):
        callback = Mock()
        self.session.register_alert_callback(callback)

        self.session.start()

        assert wait_for(lambda: callback.called)
        callback.assert_any_call("SUSPICIOUS_PROCESS", "Detected suspicious process: teamviewer.exe")

    def test_second_start_only_warns(self, caplog):
        self.session.start()
        self.session.wait_until_started(2.0)

        with caplog.at_level(logging.WARNING, logger="examguard"):
            assert self.session.start() is False

        assert "already running" in caplog.text

    def test_stop(self):
        self.session.start()
        self.session.wait_until_started(2.0)

        assert self.session.stop() is True
        assert self.session.is_running() is False
        assert self.session.manager.detection_active is False

    def test_failed_start_stops_session(self):
        def unsupported():
            raise UnsupportedPlatformError("Unknown")

        session = MonitoringSession(self.config, ProviderFactory(unsupported))

        assert session.start() is True
        assert session.wait_until_started(2.0) is False
        assert isinstance(session.start_error, UnsupportedPlatformError)
        assert session.is_running() is False
        session.shutdown()

    def test_shutdown_releases_provider(self):
        self.session.start()
        self.session.wait_until_started(2.0)

        self.session.shutdown()

        assert self.provider.released is True


@pytest.mark.integration
class TestSessionManager:
    """Test cases for SessionManager."""

    def setup_method(self):
        self.providers = []

        def build():
            provider = FakeProvider()
            self.providers.append(provider)
            return provider

        self.sessions = SessionManager(ProviderFactory(build))
        self.config = Configuration.builder().set_scan_interval(50).build()

    def teardown_method(self):
        self.sessions.release_all_instances()

    def test_create_instance(self):
        session_id = self.sessions.create_instance(self.config)

        assert len(session_id) == 36
        assert self.sessions.get_instance_configuration(session_id) is self.config
        assert self.sessions.get_all_instances() == {session_id: False}

    def test_start_and_stop(self):
        session_id = self.sessions.create_instance(self.config)

        assert self.sessions.start_monitoring(session_id) is True
        assert wait_for(lambda: self.sessions.is_monitoring(session_id))
        assert self.sessions.stop_monitoring(session_id) is True
        assert self.sessions.is_monitoring(session_id) is False

    def test_sessions_are_independent(self):
        first = self.sessions.create_instance(self.config)
        second = self.sessions.create_instance(self.config)

        self.sessions.start_monitoring(first)
        assert wait_for(lambda: self.sessions.is_monitoring(first))

        assert self.sessions.get_all_instances() == {first: True, second: False}
        assert self.sessions.get_session(first).manager.provider is not \
            self.sessions.get_session(second).manager.provider

    def test_unknown_id(self, caplog):
        with caplog.at_level(logging.ERROR, logger="examguard"):
            assert self.sessions.release_instance("missing") is False
            assert self.sessions.start_monitoring("missing") is False
            assert self.sessions.stop_monitoring("missing") is False
            assert self.sessions.register_alert_callback("missing", Mock()) is False
            assert self.sessions.unregister_alert_callback("missing", Mock()) is False

        assert self.sessions.is_monitoring("missing") is False
        assert self.sessions.get_instance_configuration("missing") is None
        assert self.sessions.get_all_instances() == {}
        assert "Invalid instance ID: missing" in caplog.text

    def test_release_instance(self):
        session_id = self.sessions.create_instance(self.config)
        self.sessions.start_monitoring(session_id)
        assert wait_for(lambda: self.sessions.is_monitoring(session_id))

        assert self.sessions.release_instance(session_id) is True

        assert self.sessions.is_monitoring(session_id) is False
        assert session_id not in self.sessions.get_all_instances()
        assert self.providers[0].released is True

    def test_release_all_instances(self):
        ids = [self.sessions.create_instance(self.config) for _ in range(3)]
        for session_id in ids:
            self.sessions.start_monitoring(session_id)

        self.sessions.release_all_instances()

        assert self.sessions.get_all_instances() == {}
        assert all(not self.sessions.is_monitoring(session_id) for session_id in ids)

    def test_stop_from_alert_callback_then_restart(self):
        provider = FakeProvider(active_window_title="LeetCode - Two Sum")
        sessions = SessionManager(ProviderFactory(lambda: provider))
        session_id = sessions.create_instance(self.config)
        seen = []

        def on_alert(alert_type, details):
            seen.append(details)
            if len(seen) == 1:
                sessions.stop_monitoring(session_id)

        sessions.register_alert_callback(session_id, on_alert)
        manager = sessions.get_session(session_id).manager
        try:
            sessions.start_monitoring(session_id)
            assert wait_for(lambda: len(seen) == 1 and not manager.detection_active)
            assert sessions.is_monitoring(session_id) is False

            provider.set(active_window_title="HackerRank - test")
            sessions.start_monitoring(session_id)

            assert wait_for(lambda: any("hackerrank" in details for details in seen))
            assert sessions.is_monitoring(session_id) is True
            assert manager.detection_active is True
        finally:
            sessions.release_all_instances()

    def test_alert_callbacks_per_session(self):
        callback = Mock()
        session_id = self.sessions.create_instance(self.config)

        assert self.sessions.register_alert_callback(session_id, callback) is True
        assert self.sessions.unregister_alert_callback(session_id, callback) is True

    def test_registries_are_not_shared(self):
        other = SessionManager(ProviderFactory(FakeProvider))
        session_id = self.sessions.create_instance(self.config)

        assert other.get_all_instances() == {}
        assert other.release_instance(session_id) is False

    def test_set_detailed_logging(self):
        SessionManager.set_detailed_logging(True)
        assert logging.getLogger("examguard").level == logging.DEBUG

        SessionManager.set_detailed_logging(False)
        assert logging.getLogger("examguard").level == logging.INFO

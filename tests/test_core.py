"""
Test suite for configuration, events and detector base classes.
"""

import dataclasses
import threading

import pytest
from unittest.mock import Mock

from conftest import FakeProvider
from examguard.core.base import BaseDetector, PollingDetector, SecurityEvent
from examguard.core.configuration import Configuration
from examguard.core.exceptions import ConfigurationError, UnsupportedPlatformError


@pytest.mark.unit
class TestConfiguration:
    """Test cases for Configuration and ConfigurationBuilder."""

    def test_defaults(self):
        config = Configuration()

        assert config.scan_interval_ms == 5000
        assert config.detailed_logging is False
        assert len(config.enabled_detectors()) == 8
        assert config.suspicious_processes == ('chatgpt', 'copilot', 'virtualbox', 'vmware', 'anydesk', 'teamviewer')
        assert 'leetcode' in config.platform_identifiers
        assert 'zoom' in config.video_call_applications

    def test_builder_lowercases_entries(self):
        config = (Configuration.builder()
                  .add_suspicious_process("Cluely")
                  .set_platform_identifiers(["CoderPad"])
                  .add_video_call_application("GoToMeeting")
                  .build())

        assert config.suspicious_processes[-1] == "cluely"
        assert config.platform_identifiers == ("coderpad",)
        assert "gotomeeting" in config.video_call_applications

    def test_direct_construction_lowercases_entries(self):
        config = Configuration(suspicious_processes=["AnyDesk"])

        assert config.suspicious_processes == ("anydesk",)

    def test_builder_toggles(self):
        config = (Configuration.builder()
                  .enable_clipboard_monitoring(False)
                  .enable_browser_monitoring(False)
                  .enable_detailed_logging(True)
                  .set_scan_interval(2000)
                  .build())

        assert 'clipboard' not in config.enabled_detectors()
        assert 'browser' not in config.enabled_detectors()
        assert config.detailed_logging is True
        assert config.scan_interval == 2.0

    def test_immutable(self):
        config = Configuration()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.scan_interval_ms = 10

    @pytest.mark.parametrize("interval", [0, -1, 1.5, True, "5000"])
    def test_invalid_scan_interval(self, interval):
        with pytest.raises(ValueError):
            Configuration.builder().set_scan_interval(interval).build()

    def test_from_options(self):
        config = Configuration.from_options({
            'clipboardMonitoring': False,
            'leetCodeDetection': False,
            'scanIntervalMs': 1000,
            'suspiciousProcesses': ['Interview-Coder'],
        })

        assert config.clipboard_monitoring is False
        assert config.leetcode_detection is False
        assert config.scan_interval_ms == 1000
        assert config.suspicious_processes == ('interview-coder',)
        assert 'active_window' not in config.enabled_detectors()

    def test_from_options_unknown_name(self):
        with pytest.raises(ConfigurationError, match="bogusOption"):
            Configuration.from_options({'bogusOption': True})

    def test_from_options_rejects_bare_string_list(self):
        with pytest.raises(ValueError):
            Configuration.from_options({'platformIdentifiers': 'leetcode'})

    def test_to_dict_round_trips(self):
        config = Configuration.builder().set_scan_interval(3000).build()

        assert Configuration.from_options(config.to_dict()) == config


@pytest.mark.unit
class TestSecurityEvent:
    """Test cases for SecurityEvent."""

    def test_alert_namespace(self):
        event = SecurityEvent("ALERT_REMOTE_ACCESS", "teamviewer")

        assert event.is_alert is True
        assert event.alert_type == "REMOTE_ACCESS"

    def test_info_namespace(self):
        event = SecurityEvent("INFO_NEW_TRAY_APP", "dropbox")

        assert event.is_alert is False
        assert event.alert_type is None

    def test_equality_ignores_metadata(self):
        assert SecurityEvent("INFO_X", "a", source="one") == SecurityEvent("INFO_X", "a", source="two")

    def test_to_dict(self):
        data = SecurityEvent("INFO_X", "details", source="clipboard").to_dict()

        assert data['event_type'] == "INFO_X"
        assert data['source'] == "clipboard"
        assert 'timestamp' in data


class ExplodingDetector(BaseDetector):
    name = "exploding"

    def _detect(self):
        self.emit("INFO_BEFORE", "emitted before failure")
        raise RuntimeError("boom")


class CountingDetector(PollingDetector):
    name = "counting"

    def __init__(self, *args, **kwargs):
        self.ticks = 0
        self.resets = 0
        self.ticked = threading.Event()
        super().__init__(*args, **kwargs)

    def reset(self):
        self.resets += 1

    def _detect(self):
        self.ticks += 1
        self.ticked.set()


@pytest.mark.unit
class TestBaseDetector:
    """Test cases for BaseDetector."""

    def test_exceptions_are_absorbed(self):
        detector = ExplodingDetector(Configuration(), FakeProvider())

        events = detector.detect()

        assert [e.event_type for e in events] == ["INFO_BEFORE"]

    def test_publish_failure_does_not_break_tick(self):
        sink = Mock(side_effect=RuntimeError("queue closed"))
        detector = ExplodingDetector(Configuration(), FakeProvider(), sink)

        assert len(detector.detect()) == 1
        sink.assert_called_once()

    def test_snapshot_reports_failure_as_none(self):
        provider = FakeProvider()
        provider.fail('clipboard_text')
        detector = ExplodingDetector(Configuration(), provider)

        assert detector.snapshot('clipboard_text') is None


@pytest.mark.integration
class TestPollingDetector:
    """Test cases for PollingDetector loops."""

    def test_start_and_stop(self):
        detector = CountingDetector(Configuration(), FakeProvider(), interval=0.01)

        detector.start_monitoring()
        assert detector.ticked.wait(2.0)
        detector.stop_monitoring()

        assert detector.monitoring_active is False
        assert detector.ticks >= 1
        assert detector.resets == 1

    def test_second_start_is_ignored(self):
        detector = CountingDetector(Configuration(), FakeProvider(), interval=0.01)

        detector.start_monitoring()
        detector.start_monitoring()
        detector.stop_monitoring()

        assert detector.resets == 1

    def test_stop_without_start(self):
        detector = CountingDetector(Configuration(), FakeProvider())

        detector.stop_monitoring()

        assert detector.get_status()['monitoring_active'] is False


@pytest.mark.unit
def test_unsupported_platform_message():
    error = UnsupportedPlatformError("Plan9")

    assert str(error) == "Unsupported platform: Plan9"
    assert error.platform_name == "Plan9"

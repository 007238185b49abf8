"""
Test suite for capability providers and platform selection.
"""

import subprocess

import pytest
from unittest.mock import Mock, patch

from conftest import FakeProvider
from examguard.core.exceptions import UnsupportedPlatformError
from examguard.providers import factory
from examguard.providers.base import SampleResult
from examguard.providers.factory import ProviderFactory, create_provider, get_provider, reset_provider
from examguard.providers.platform_detector import Platform, detect_platform, is_supported
from examguard.providers.system import SystemProvider


@pytest.mark.unit
class TestPlatformDetection:
    """Test cases for detect_platform."""

    @pytest.mark.parametrize("os_name, expected", [
        ("Windows", Platform.WINDOWS),
        ("windows 11", Platform.WINDOWS),
        ("CYGWIN_NT-10.0", Platform.WINDOWS),
        ("Darwin", Platform.MACOS),
        ("Mac OS X", Platform.MACOS),
        ("Linux", Platform.LINUX),
        ("AIX", Platform.LINUX),
        ("FreeBSD", Platform.UNKNOWN),
        ("", Platform.UNKNOWN),
        (None, Platform.UNKNOWN),
    ])
    def test_mapping(self, os_name, expected):
        assert detect_platform(os_name) is expected

    def test_is_supported(self):
        assert is_supported("Linux") is True
        assert is_supported("Haiku") is False


@pytest.mark.unit
class TestCapabilityProvider:
    """Test cases for the provider boundary."""

    def setup_method(self):
        self.provider = FakeProvider(active_window_title="Editor")

    def test_sample_success(self):
        assert self.provider.sample('active_window_title') == SampleResult("Editor", True, None)

    def test_sample_failure_returns_empty_value(self):
        self.provider.fail('running_processes', 'camera_active', 'browser_tab_counts')

        result = self.provider.sample('running_processes')

        assert result.ok is False
        assert result.value == []
        assert "running_processes unavailable" in result.error
        assert self.provider.camera_active() is False
        assert self.provider.browser_tab_counts() == {}

    def test_failure_value_is_not_shared(self):
        self.provider.fail('running_processes')

        first = self.provider.running_processes()
        first.append("mutated")

        assert self.provider.running_processes() == []

    def test_none_is_treated_as_no_data(self):
        self.provider.set(active_window_title=None)

        assert self.provider.sample('active_window_title') == SampleResult("", True, None)

    def test_unknown_capability(self):
        with pytest.raises(AttributeError):
            self.provider.sample('keystrokes')

    def test_release_is_idempotent(self):
        self.provider.release()
        self.provider.release()

        assert self.provider.released is True
        assert self.provider.release_count == 1


@pytest.mark.unit
class TestProviderFactory:
    """Test cases for provider selection and caching."""

    def teardown_method(self):
        factory._provider = None

    def test_unknown_platform_is_fatal(self):
        with pytest.raises(UnsupportedPlatformError):
            create_provider(Platform.UNKNOWN)

    @patch('examguard.providers.factory.create_provider')
    @patch('examguard.providers.factory.current_platform', return_value=Platform.LINUX)
    def test_get_provider_caches_first_instance(self, mock_platform, mock_create):
        mock_create.return_value = FakeProvider()

        first = get_provider()
        second = get_provider()

        assert first is second
        mock_create.assert_called_once_with(Platform.LINUX)

    @patch('examguard.providers.factory.create_provider')
    @patch('examguard.providers.factory.current_platform', return_value=Platform.LINUX)
    def test_reset_provider_releases_cached_instance(self, mock_platform, mock_create):
        cached = FakeProvider()
        mock_create.return_value = cached
        get_provider()

        reset_provider()

        assert cached.released is True
        assert factory._provider is None

    def test_custom_builder_is_released(self):
        provider = FakeProvider()
        provider_factory = ProviderFactory(lambda: provider)

        assert provider_factory.create() is provider
        provider_factory.release(provider)

        assert provider.released is True

    def test_shared_provider_outlives_session(self):
        provider = FakeProvider()
        provider_factory = ProviderFactory()

        provider_factory.release(provider)

        assert provider_factory.shared is True
        assert provider.released is False


class StubSystemProvider(SystemProvider):
    """SystemProvider with the window-system samplers stubbed out."""

    def _active_window_title(self):
        return ""

    def _tray_applications(self):
        return []

    def _camera_active(self):
        return False

    def _user_active(self):
        return True

    def _device_identifier(self):
        return "stub"


def fake_process(name, rss=0):
    proc = Mock()
    proc.info = {'name': name, 'memory_info': Mock(rss=rss)}
    return proc


@pytest.mark.unit
class TestSystemProvider:
    """Test cases for the psutil-backed sampling."""

    def setup_method(self):
        self.provider = StubSystemProvider()

    @patch('examguard.providers.system.psutil.process_iter')
    def test_browser_tab_estimate(self, mock_iter):
        mock_iter.return_value = [
            fake_process("chrome.exe"), fake_process("chrome.exe"), fake_process("chrome.exe"),
            fake_process("chrome.exe"), fake_process("firefox"), fake_process("explorer.exe"),
        ]

        assert self.provider.browser_tab_counts() == {'chrome': 3, 'firefox': 1}

    @patch('examguard.providers.system.psutil.process_iter')
    def test_browser_tab_estimate_from_memory(self, mock_iter):
        mock_iter.return_value = [fake_process("msedge.exe", rss=8 * SystemProvider.TAB_MEMORY_BYTES)]

        assert self.provider.browser_tab_counts() == {'edge': 8}

    @patch('examguard.providers.system.psutil.process_iter')
    def test_screen_sharing_app(self, mock_iter):
        mock_iter.return_value = [fake_process("bash"), fake_process("AnyDesk.exe")]

        assert self.provider.screen_sharing() is True
        assert self.provider.screen_sharing_app() == "AnyDesk.exe"

    @patch('examguard.providers.system.pyperclip.paste', side_effect=RuntimeError("no clipboard"))
    def test_clipboard_failure_is_absorbed(self, mock_paste):
        assert self.provider.clipboard_text() == ""
        assert self.provider.sample('clipboard_text').ok is False

    @patch('examguard.providers.system.subprocess.run', side_effect=FileNotFoundError)
    def test_missing_utility_means_no_output(self, mock_run):
        assert self.provider.run_command(["xdotool", "getwindowfocus"]) == ""

    @patch('examguard.providers.system.subprocess.run')
    def test_failed_command_means_no_output(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 1, stdout="partial", stderr="error")

        assert self.provider.run_command(["lsof"]) == ""

    @patch('examguard.providers.system.subprocess.run',
           side_effect=subprocess.TimeoutExpired(["osascript"], 2))
    def test_timeout_propagates(self, mock_run):
        with pytest.raises(subprocess.TimeoutExpired):
            self.provider.run_command(["osascript"])

    def test_activity_tracking(self):
        self.provider.record_activity()

        assert self.provider.seconds_since_activity() < 1.0

"""
Immutable per-session configuration and its builder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .config import Config
from .exceptions import ConfigurationError


def _normalize(entries: Iterable[str]) -> Tuple[str, ...]:
    return tuple(str(entry).lower() for entry in entries)


@dataclass(frozen=True)
class Configuration:
    """Settings for one monitoring session. Never mutated after construction."""

    process_monitoring: bool = True
    clipboard_monitoring: bool = True
    browser_monitoring: bool = True
    leetcode_detection: bool = True
    screen_share_detection: bool = True
    video_call_detection: bool = True
    system_tray_monitoring: bool = True
    device_switch_detection: bool = True
    scan_interval_ms: int = Config.DEFAULT_SCAN_INTERVAL_MS
    detailed_logging: bool = False
    suspicious_processes: Tuple[str, ...] = field(
        default_factory=lambda: _normalize(Config.DEFAULT_SUSPICIOUS_PROCESSES))
    platform_identifiers: Tuple[str, ...] = field(
        default_factory=lambda: _normalize(Config.DEFAULT_PLATFORM_IDENTIFIERS))
    video_call_applications: Tuple[str, ...] = field(
        default_factory=lambda: _normalize(Config.DEFAULT_VIDEO_CALL_APPLICATIONS))

    def __post_init__(self):
        if isinstance(self.scan_interval_ms, bool) or not isinstance(self.scan_interval_ms, int):
            raise ConfigurationError(f"scan_interval_ms must be an integer, got {self.scan_interval_ms!r}")
        if self.scan_interval_ms <= 0:
            raise ConfigurationError(f"scan_interval_ms must be positive, got {self.scan_interval_ms}")
        # Entries passed directly (not through the builder) are normalized here too
        object.__setattr__(self, 'suspicious_processes', _normalize(self.suspicious_processes))
        object.__setattr__(self, 'platform_identifiers', _normalize(self.platform_identifiers))
        object.__setattr__(self, 'video_call_applications', _normalize(self.video_call_applications))

    @property
    def scan_interval(self) -> float:
        """Scan interval in seconds."""
        return self.scan_interval_ms / 1000.0

    def enabled_detectors(self) -> List[str]:
        """Names of the detector categories switched on."""
        flags = {
            'active_window': self.leetcode_detection,
            'browser': self.browser_monitoring,
            'clipboard': self.clipboard_monitoring,
            'device_switch': self.device_switch_detection,
            'process': self.process_monitoring,
            'screen_share': self.screen_share_detection,
            'system_tray': self.system_tray_monitoring,
            'video_call': self.video_call_detection,
        }
        return [name for name, enabled in flags.items() if enabled]

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to the option mapping accepted by from_options."""
        options = {}
        for option, attr in OPTION_NAMES.items():
            value = getattr(self, attr)
            options[option] = list(value) if attr in _LIST_OPTIONS else value
        return options

    @classmethod
    def builder(cls) -> 'ConfigurationBuilder':
        return ConfigurationBuilder()

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> 'Configuration':
        """
        Build a configuration from host-supplied option names.

        Args:
            options: mapping using the camelCase option names, e.g.
                ``{"clipboardMonitoring": False, "scanIntervalMs": 2000}``

        Raises:
            ConfigurationError: for unknown option names or invalid values.
        """
        unknown = set(options) - set(OPTION_NAMES)
        if unknown:
            raise ConfigurationError(f"Unknown configuration options: {', '.join(sorted(unknown))}")

        builder = ConfigurationBuilder()
        for option, value in options.items():
            attr = OPTION_NAMES[option]
            if attr in _LIST_OPTIONS:
                if isinstance(value, str):
                    raise ConfigurationError(f"{option} must be a sequence of strings")
                builder._lists[attr] = list(_normalize(value))
            else:
                builder._values[attr] = value
        return builder.build()


# Host-facing option name -> Configuration attribute
OPTION_NAMES = {
    'processMonitoring': 'process_monitoring',
    'clipboardMonitoring': 'clipboard_monitoring',
    'browserMonitoring': 'browser_monitoring',
    'leetCodeDetection': 'leetcode_detection',
    'screenShareDetection': 'screen_share_detection',
    'videoCallDetection': 'video_call_detection',
    'systemTrayMonitoring': 'system_tray_monitoring',
    'deviceSwitchDetection': 'device_switch_detection',
    'scanIntervalMs': 'scan_interval_ms',
    'detailedLogging': 'detailed_logging',
    'suspiciousProcesses': 'suspicious_processes',
    'platformIdentifiers': 'platform_identifiers',
    'videoCallApplications': 'video_call_applications',
}

_LIST_OPTIONS = ('suspicious_processes', 'platform_identifiers', 'video_call_applications')


class ConfigurationBuilder:
    """Fluent builder; every list entry is lowercased on insertion."""

    def __init__(self):
        self._values: Dict[str, Any] = {}
        self._lists: Dict[str, List[str]] = {
            'suspicious_processes': list(_normalize(Config.DEFAULT_SUSPICIOUS_PROCESSES)),
            'platform_identifiers': list(_normalize(Config.DEFAULT_PLATFORM_IDENTIFIERS)),
            'video_call_applications': list(_normalize(Config.DEFAULT_VIDEO_CALL_APPLICATIONS)),
        }

    def enable_process_monitoring(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['process_monitoring'] = enabled
        return self

    def enable_clipboard_monitoring(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['clipboard_monitoring'] = enabled
        return self

    def enable_browser_monitoring(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['browser_monitoring'] = enabled
        return self

    def enable_leetcode_detection(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['leetcode_detection'] = enabled
        return self

    def enable_screen_share_detection(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['screen_share_detection'] = enabled
        return self

    def enable_video_call_detection(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['video_call_detection'] = enabled
        return self

    def enable_system_tray_monitoring(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['system_tray_monitoring'] = enabled
        return self

    def enable_device_switch_detection(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['device_switch_detection'] = enabled
        return self

    def enable_detailed_logging(self, enabled: bool) -> 'ConfigurationBuilder':
        self._values['detailed_logging'] = enabled
        return self

    def set_scan_interval(self, interval_ms: int) -> 'ConfigurationBuilder':
        self._values['scan_interval_ms'] = interval_ms
        return self

    def add_suspicious_process(self, process_name: str) -> 'ConfigurationBuilder':
        self._lists['suspicious_processes'].append(process_name.lower())
        return self

    def set_suspicious_processes(self, processes: Iterable[str]) -> 'ConfigurationBuilder':
        self._lists['suspicious_processes'] = list(_normalize(processes))
        return self

    def add_platform_identifier(self, identifier: str) -> 'ConfigurationBuilder':
        self._lists['platform_identifiers'].append(identifier.lower())
        return self

    def set_platform_identifiers(self, identifiers: Iterable[str]) -> 'ConfigurationBuilder':
        self._lists['platform_identifiers'] = list(_normalize(identifiers))
        return self

    def add_video_call_application(self, application: str) -> 'ConfigurationBuilder':
        self._lists['video_call_applications'].append(application.lower())
        return self

    def set_video_call_applications(self, applications: Iterable[str]) -> 'ConfigurationBuilder':
        self._lists['video_call_applications'] = list(_normalize(applications))
        return self

    def build(self) -> Configuration:
        lists = {name: tuple(entries) for name, entries in self._lists.items()}
        return Configuration(**self._values, **lists)

"""
Operating system detection.
"""

import platform
from enum import Enum


class Platform(Enum):
    WINDOWS = "Windows"
    MACOS = "macOS"
    LINUX = "Linux"
    UNKNOWN = "Unknown"


def detect_platform(os_name: str) -> Platform:
    """Map an OS name (as reported by ``platform.system()``) to a Platform."""
    name = (os_name or "").lower()
    if name.startswith("win") or name.startswith("cygwin"):
        return Platform.WINDOWS
    if "darwin" in name or "mac" in name:
        return Platform.MACOS
    if "linux" in name or "nix" in name or "nux" in name or "aix" in name:
        return Platform.LINUX
    return Platform.UNKNOWN


def current_platform() -> Platform:
    return detect_platform(platform.system())


def is_supported(os_name: str = None) -> bool:
    target = detect_platform(os_name) if os_name is not None else current_platform()
    return target is not Platform.UNKNOWN

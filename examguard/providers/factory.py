"""
Provider selection.

The provider for the running OS is built once per process and cached; the
first caller wins and later callers receive the same instance.
"""

import logging
import threading
from typing import Callable, Optional

from ..core.exceptions import UnsupportedPlatformError
from .base import CapabilityProvider
from .platform_detector import Platform, current_platform

logger = logging.getLogger(__name__)

_provider: Optional[CapabilityProvider] = None
_provider_lock = threading.Lock()


def create_provider(target: Platform) -> CapabilityProvider:
    """Build a fresh provider for ``target``; raises on an unsupported platform."""
    # OS modules import platform-only libraries, so load them on demand
    if target is Platform.WINDOWS:
        from .windows import WindowsProvider
        return WindowsProvider()
    if target is Platform.MACOS:
        from .macos import MacOSProvider
        return MacOSProvider()
    if target is Platform.LINUX:
        from .linux import LinuxProvider
        return LinuxProvider()
    raise UnsupportedPlatformError(target.value)


def get_provider() -> CapabilityProvider:
    """Process-wide provider for the current OS."""
    global _provider
    with _provider_lock:
        if _provider is None:
            target = current_platform()
            _provider = create_provider(target)
            logger.info("Initialized %s capability provider", target.value)
        return _provider


def reset_provider() -> None:
    """Release and forget the cached provider (used by tests and at exit)."""
    global _provider
    with _provider_lock:
        provider, _provider = _provider, None
    if provider is not None:
        provider.release()


class ProviderFactory:
    """
    Supplies a session with its capability provider.

    The default factory hands out the cached process-wide provider; tests and
    embedding hosts pass ``builder`` to supply their own.
    """

    def __init__(self, builder: Callable[[], CapabilityProvider] = None):
        self._builder = builder or get_provider

    @property
    def shared(self) -> bool:
        return self._builder is get_provider

    def create(self) -> CapabilityProvider:
        return self._builder()

    def release(self, provider: CapabilityProvider) -> None:
        """Free a provider obtained from ``create``.

        The process-wide provider outlives any one session and is only
        released by ``reset_provider``.
        """
        if self.shared:
            logger.debug("Keeping shared %s provider alive", provider.platform_name)
            return
        provider.release()

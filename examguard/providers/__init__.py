"""
Capability providers: OS-specific sampling behind one interface.
"""

from .base import CapabilityProvider, SampleResult
from .platform_detector import Platform, detect_platform, current_platform, is_supported
from .factory import ProviderFactory, create_provider, get_provider, reset_provider

__all__ = [
    'CapabilityProvider',
    'SampleResult',
    'Platform',
    'detect_platform',
    'current_platform',
    'is_supported',
    'ProviderFactory',
    'create_provider',
    'get_provider',
    'reset_provider'
]

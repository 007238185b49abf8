"""
Utilities module initialization.
"""

from .security_utils import SecurityUtils
from .process_utils import ProcessUtils

__all__ = [
    'SecurityUtils',
    'ProcessUtils'
]

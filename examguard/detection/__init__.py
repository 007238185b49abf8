"""
Detection module initialization.
"""

from .active_window import ActiveWindowDetector
from .browser_monitor import BrowserMonitor
from .clipboard_monitor import ClipboardMonitor
from .device_switch import DeviceSwitchDetector
from .process_monitor import ProcessMonitor
from .screen_share import ScreenShareDetector
from .system_tray import SystemTrayMonitor
from .video_call import VideoCallDetector
from .scheduler import Scheduler
from .detection_manager import DetectionManager

__all__ = [
    'ActiveWindowDetector',
    'BrowserMonitor',
    'ClipboardMonitor',
    'DeviceSwitchDetector',
    'ProcessMonitor',
    'ScreenShareDetector',
    'SystemTrayMonitor',
    'VideoCallDetector',
    'Scheduler',
    'DetectionManager'
]

"""
Sampling shared by every desktop OS: psutil for processes and network
adapters, pyperclip for the clipboard, subprocess for OS utilities.
"""

import logging
import subprocess
import time
from typing import Dict, Iterable, List, Optional

import psutil
import pyperclip

from ..core.config import Config
from ..utils.process_utils import ProcessUtils
from .base import CapabilityProvider

logger = logging.getLogger(__name__)


class SystemProvider(CapabilityProvider):
    """psutil-backed sampling; OS subclasses fill in the window-system parts."""

    # Applications able to share the screen, matched against process names
    SCREEN_SHARING_PROCESSES = [
        'zoom', 'teams', 'webex', 'skype', 'discord', 'anydesk', 'teamviewer',
        'vnc', 'screenflow', 'screencast'
    ]

    # Processes that hold the microphone open while running
    MICROPHONE_PROCESSES = [
        'zoom', 'teams', 'skype', 'webex', 'discord'
    ]

    # Estimated memory footprint of one browser tab
    TAB_MEMORY_BYTES = 50 * 1024 * 1024

    def __init__(self):
        super().__init__()
        self._last_activity_time = time.time()

    def run_command(self, args: List[str], timeout: float = None) -> str:
        """
        Run an OS utility and return its stdout.

        Returns "" when the utility is not installed or exits non-zero;
        a timeout propagates so the sample is reported as failed.
        """
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout or Config.SUBPROCESS_TIMEOUT,
                check=False
            )
        except FileNotFoundError:
            logger.debug("%s is not installed", args[0])
            return ""
        if result.returncode != 0:
            return ""
        return result.stdout

    def iter_process_names(self) -> Iterable[str]:
        for proc in psutil.process_iter(['name']):
            try:
                name = proc.info['name']
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            if name:
                yield name

    def find_process(self, fragments: Iterable[str]) -> Optional[str]:
        """First running process whose name contains one of ``fragments``."""
        fragments = list(fragments)
        for name in self.iter_process_names():
            if ProcessUtils.first_match(name, fragments):
                return name
        return None

    def _running_processes(self) -> List[str]:
        return list(self.iter_process_names())

    def _clipboard_text(self) -> str:
        return pyperclip.paste() or ""

    def _microphone_active(self) -> bool:
        return self.find_process(self.MICROPHONE_PROCESSES) is not None

    def _screen_sharing(self) -> bool:
        return self.find_process(self.SCREEN_SHARING_PROCESSES) is not None

    def _screen_sharing_app(self) -> str:
        return self.find_process(self.SCREEN_SHARING_PROCESSES) or ""

    def _primary_mac_address(self) -> str:
        stats = psutil.net_if_stats()
        for interface, addresses in sorted(psutil.net_if_addrs().items()):
            interface_stats = stats.get(interface)
            if interface_stats is None or not interface_stats.isup:
                continue
            for address in addresses:
                if address.family != psutil.AF_LINK:
                    continue
                mac = (address.address or "").replace('-', ':').upper()
                if mac and mac != "00:00:00:00:00:00":
                    return mac
        return ""

    def _browser_tab_counts(self) -> Dict[str, int]:
        """
        Estimate tabs per browser from its processes.

        Multi-process browsers spawn roughly one renderer per tab, so the
        estimate is the process count minus the main process, or the
        memory-based estimate when that is larger.
        """
        processes: Dict[str, int] = {}
        memory: Dict[str, int] = {}
        for proc in psutil.process_iter(['name', 'memory_info']):
            try:
                browser = ProcessUtils.browser_name(proc.info['name'])
                if browser is None:
                    continue
                processes[browser] = processes.get(browser, 0) + 1
                memory_info = proc.info.get('memory_info')
                if memory_info is not None:
                    memory[browser] = memory.get(browser, 0) + memory_info.rss
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        counts = {}
        for browser, count in processes.items():
            by_process = max(1, count - 1)
            by_memory = memory.get(browser, 0) // self.TAB_MEMORY_BYTES
            counts[browser] = max(by_process, by_memory)
        return counts

    def record_activity(self, *args) -> None:
        """Input listener hook: remember when the user last did something."""
        self._last_activity_time = time.time()

    def seconds_since_activity(self) -> float:
        return time.time() - self._last_activity_time

"""
Running process monitoring.
"""

from typing import Set

from ..core.base import BaseDetector
from ..utils.process_utils import ProcessUtils


class ProcessMonitor(BaseDetector):
    """
    Reports newly started processes that fall into a watched category and the
    termination of any process reported earlier.

    Categories are checked per process in order: configured suspicious list,
    virtualization, remote access, AI assistants, video-call apps. Once a
    process is reported it sits in the known set, so later categories stay
    silent for it.
    """

    name = "process"

    def __init__(self, configuration, provider, publish=None):
        super().__init__(configuration, provider, publish)
        self.known_processes: Set[str] = set()

    def _flag(self, lower_name: str, event_type: str, details: str) -> None:
        if lower_name in self.known_processes:
            return
        self.known_processes.add(lower_name)
        self.emit(event_type, details)

    def _detect(self) -> None:
        processes = self.snapshot('running_processes')
        if processes is None:
            return

        self.debug("Monitoring %d processes", len(processes))

        for process in processes:
            lower_name = process.lower()

            if ProcessUtils.first_match(lower_name, self.config.suspicious_processes):
                self._flag(lower_name, "ALERT_SUSPICIOUS_PROCESS", f"Detected suspicious process: {process}")

            if ProcessUtils.is_virtualization_process(lower_name):
                self._flag(lower_name, "ALERT_VIRTUALIZATION", f"Detected virtualization software: {process}")

            if ProcessUtils.is_remote_access_process(lower_name):
                self._flag(lower_name, "ALERT_REMOTE_ACCESS", f"Detected remote access software: {process}")

            if ProcessUtils.is_ai_assistant_process(lower_name):
                self._flag(lower_name, "ALERT_AI_ASSISTANT", f"Detected AI assistant: {process}")

            if ProcessUtils.first_match(lower_name, self.config.video_call_applications):
                self._flag(lower_name, "INFO_VIDEO_PROCESS", f"Detected video application: {process}")

        running = {process.lower() for process in processes}
        for terminated in sorted(self.known_processes - running):
            self.known_processes.discard(terminated)
            self.emit("INFO_PROCESS_TERMINATED", f"Previously detected process terminated: {terminated}")

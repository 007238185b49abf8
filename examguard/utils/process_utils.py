"""
Process classification helpers.
"""

from typing import Optional


class ProcessUtils:
    """Classifies process names into the categories the detectors care about."""

    VIRTUALIZATION_PROCESSES = [
        'vmware', 'virtualbox', 'vboxservice', 'vboxtray', 'vmwaretray', 'vmwareservice',
        'vmwarep2v', 'vmusrvc', 'vbox', 'qemu', 'kvm', 'xen', 'virtualpc', 'parallels',
        'hyperv', 'vmcompute', 'vmms', 'vmwp'
    ]

    REMOTE_ACCESS_PROCESSES = [
        'teamviewer', 'anydesk', 'ammyy', 'vnc', 'x11vnc', 'tightvnc', 'ultravnc',
        'realvnc', 'logmein', 'gotomypc', 'remotepc', 'screenconnect', 'bomgar',
        'supremo', 'remotedesktop', 'mstsc', 'rdesktop', 'rdp', 'ssh', 'tmate'
    ]

    AI_ASSISTANT_PROCESSES = [
        'chatgpt', 'copilot', 'gemini', 'codegeex', 'tabnine', 'kite', 'aichat',
        'gpt', 'bard', 'claude', 'anthropic', 'llama', 'codex', 'codewhisperer'
    ]

    # Process-name fragment -> canonical browser name
    BROWSER_PROCESSES = {
        'chrome': 'chrome',
        'firefox': 'firefox',
        'msedge': 'edge',
        'opera': 'opera',
        'brave': 'brave',
        'safari': 'safari',
        'vivaldi': 'vivaldi',
        'iexplore': 'ie',
    }

    @staticmethod
    def _matches(process_name: str, fragments) -> bool:
        if not process_name:
            return False
        lower_name = process_name.lower()
        return any(fragment in lower_name for fragment in fragments)

    @classmethod
    def is_virtualization_process(cls, process_name: str) -> bool:
        return cls._matches(process_name, cls.VIRTUALIZATION_PROCESSES)

    @classmethod
    def is_remote_access_process(cls, process_name: str) -> bool:
        return cls._matches(process_name, cls.REMOTE_ACCESS_PROCESSES)

    @classmethod
    def is_ai_assistant_process(cls, process_name: str) -> bool:
        return cls._matches(process_name, cls.AI_ASSISTANT_PROCESSES)

    @classmethod
    def browser_name(cls, process_name: str) -> Optional[str]:
        """Canonical browser name for a process, or None if it is not a browser."""
        if not process_name:
            return None
        lower_name = process_name.lower()
        for fragment, browser in cls.BROWSER_PROCESSES.items():
            if fragment in lower_name:
                return browser
        return None

    @staticmethod
    def first_match(value: str, candidates) -> Optional[str]:
        """First (lowercase) candidate contained in value, scanned in declared order."""
        lower_value = value.lower()
        for candidate in candidates:
            if candidate in lower_value:
                return candidate
        return None

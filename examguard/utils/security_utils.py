"""
Security utilities for audit logging, hashing and content heuristics.
"""

import getpass
import hashlib
import logging
import platform
import re
import socket
from datetime import datetime
from pathlib import Path
from typing import Dict

from ..core.config import Config

logger = logging.getLogger(__name__)


class SecurityUtils:
    """Utility class for security-related operations."""

    # Substrings that make clipboard text look like source code
    CODE_INDICATORS = [
        'public ', 'private ', 'protected ', 'class ', 'function ', 'def ',
        'import ', 'package ', 'return ', 'var ', 'const ', 'let ',
        'if(', 'if (', 'for(', 'for (', 'while(', 'while (',
        '=>', '->', '===', '!=='
    ]
    CODE_SYMBOL_DENSITY = 0.02  # brackets and semicolons per character
    INDENTED_LINE_RATIO = 0.3

    @staticmethod
    def get_system_info() -> Dict[str, str]:
        """Get basic information about the monitored machine."""
        try:
            hostname = socket.gethostname()
            try:
                ip_address = socket.gethostbyname(hostname)
            except OSError:
                ip_address = "127.0.0.1"

            return {
                'computer_name': hostname,
                'username': getpass.getuser(),
                'ip_address': ip_address,
                'platform': platform.system(),
                'timestamp': datetime.now().strftime(Config.LOG_TIMESTAMP_FORMAT)
            }
        except Exception:
            return {
                'computer_name': 'Unknown',
                'username': 'Unknown',
                'ip_address': '127.0.0.1',
                'platform': 'Unknown',
                'timestamp': datetime.now().strftime(Config.LOG_TIMESTAMP_FORMAT)
            }

    @staticmethod
    def log_security_event(event_type: str, details: str = "") -> None:
        """Append a security event to the daily audit log with system info."""
        logger.info("%s: %s", event_type, details)
        if not Config.SECURITY_LOG_ENABLED:
            return

        try:
            Config.ensure_directories()

            log_date = datetime.now().strftime(Config.LOG_DATE_FORMAT)
            log_filepath = Path(Config.LOGS_DIR) / f"security_log_{log_date}.txt"

            sys_info = SecurityUtils.get_system_info()

            log_entry = (
                f"[{sys_info['timestamp']}] "
                f"{event_type} | "
                f"Computer: {sys_info['computer_name']} | "
                f"User: {sys_info['username']} | "
                f"IP: {sys_info['ip_address']} | "
                f"Details: {SecurityUtils.sanitize_for_logging(details)}\n"
            )

            with open(log_filepath, 'a', encoding='utf-8') as log_file:
                log_file.write(log_entry)

        except Exception as e:
            logger.error("Error logging security event %s: %s", event_type, e)

    @staticmethod
    def calculate_sha256(content: str) -> str:
        """Hex SHA-256 of a string; used to remember content without keeping it."""
        return hashlib.sha256(content.encode('utf-8', errors='replace')).hexdigest()

    @staticmethod
    def sanitize_for_logging(data: str) -> str:
        """Truncate values so sensitive content never lands in logs in full."""
        if not data:
            return ""
        if len(data) > Config.LOG_VALUE_MAX_LENGTH:
            return data[:Config.LOG_VALUE_MAX_LENGTH - 3] + "..."
        return data

    @staticmethod
    def preview(data: str, length: int = None) -> str:
        """Short preview of clipboard-style content."""
        length = length or Config.CLIPBOARD_PREVIEW_LENGTH
        return data if len(data) <= length else data[:length] + "..."

    @staticmethod
    def is_likely_code(content: str) -> bool:
        """
        Heuristic check for source code.

        Matches on language keywords, on bracket/semicolon density, or on a
        block where more than 30% of at least four lines are indented.
        """
        if not content:
            return False

        if any(indicator in content for indicator in SecurityUtils.CODE_INDICATORS):
            return True

        symbols = len(re.findall(r'[{};\[\]]', content))
        if symbols >= 3 and symbols / len(content) >= SecurityUtils.CODE_SYMBOL_DENSITY:
            return True

        lines = content.splitlines()
        indented = sum(1 for line in lines if line.startswith("    ") or line.startswith("\t"))
        return len(lines) > 3 and indented / len(lines) > SecurityUtils.INDENTED_LINE_RATIO


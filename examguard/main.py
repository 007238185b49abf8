"""
Command-line entry point: run one monitoring session and print its alerts.
"""

import argparse
import logging
import sys
import time

from .core.config import Config
from .core.configuration import Configuration
from .security.session_manager import SessionManager
from .utils.security_utils import SecurityUtils


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="examguard", description="ExamGuard monitoring agent")
    parser.add_argument("--duration", type=float, default=60.0,
                        help="Seconds to monitor before shutting down (0 runs until interrupted)")
    parser.add_argument("--interval", type=int, default=Config.DEFAULT_SCAN_INTERVAL_MS,
                        help="Scan interval in milliseconds")
    parser.add_argument("--verbose", action="store_true", help="Enable detailed logging")
    return parser.parse_args(argv)


def print_alert(alert_type: str, details: str) -> None:
    print(f"🚨 [{time.strftime('%H:%M:%S')}] {alert_type}: {details}", flush=True)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sessions = SessionManager()
    sessions.set_detailed_logging(args.verbose)

    try:
        configuration = (Configuration.builder()
                         .set_scan_interval(args.interval)
                         .enable_detailed_logging(args.verbose)
                         .build())
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 2

    SecurityUtils.log_security_event("SYSTEM_START", "ExamGuard monitoring agent starting")
    session_id = sessions.create_instance(configuration)
    sessions.register_alert_callback(session_id, print_alert)

    print(f"🔍 Monitoring session {session_id} started. Press Ctrl+C to stop.")
    sessions.start_monitoring(session_id)
    exit_code = 0
    try:
        deadline = time.monotonic() + args.duration if args.duration > 0 else None
        while deadline is None or time.monotonic() < deadline:
            time.sleep(0.5)
            session = sessions.get_session(session_id)
            if session is not None and session.start_error is not None:
                print(f"❌ Monitoring failed to start: {session.start_error}")
                exit_code = 1
                break
    except KeyboardInterrupt:
        print("\n🛑 Monitoring stopped by user")
        SecurityUtils.log_security_event("SYSTEM_SHUTDOWN", "System shutdown by user interrupt")
    finally:
        sessions.release_all_instances()

    print("✅ All sessions released")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

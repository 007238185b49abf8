"""
Periodic task scheduler for detector ticks.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional

from ..core.config import Config

logger = logging.getLogger(__name__)


class PeriodicTask:
    """One recurring job; ``future`` is the run currently in flight, if any."""

    def __init__(self, name: str, func: Callable[[], object], interval: float, initial_delay: float = 0.0):
        self.name = name
        self.func = func
        self.interval = interval
        self.next_run = time.monotonic() + initial_delay
        self.future: Optional[Future] = None
        self.runs = 0
        self.skipped = 0
        self.failures = 0

    @property
    def in_flight(self) -> bool:
        return self.future is not None and not self.future.done()


class Scheduler:
    """
    Fixed-size worker pool fed by a single timing thread.

    Each task has at most one run in flight: a tick that falls due while the
    previous run is still executing is skipped, so a detector is never
    invoked concurrently with itself. Task exceptions are logged and the
    schedule carries on.
    """

    def __init__(self, pool_size: int = None, name: str = "examguard-scheduler"):
        self.pool_size = pool_size or Config.SCHEDULER_POOL_SIZE
        self.name = name
        self._tasks: Dict[str, PeriodicTask] = {}
        self._lock = threading.Lock()
        self._wakeup = threading.Event()
        self._stopping = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._timer: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopping.is_set()

    def schedule(self, name: str, func: Callable[[], object], interval: float,
                 initial_delay: float = 0.0) -> PeriodicTask:
        """Run ``func`` every ``interval`` seconds, first after ``initial_delay``."""
        if interval <= 0:
            raise ValueError("Interval must be positive")
        task = PeriodicTask(name, func, interval, initial_delay)
        with self._lock:
            self._tasks[name] = task
        self._wakeup.set()
        logger.debug("Scheduled %s every %.1fs", name, interval)
        return task

    def cancel(self, name: str) -> bool:
        with self._lock:
            task = self._tasks.pop(name, None)
        if task is None:
            return False
        if task.future is not None:
            task.future.cancel()
        return True

    def tasks(self) -> List[PeriodicTask]:
        with self._lock:
            return list(self._tasks.values())

    def start(self) -> None:
        if self.running:
            logger.warning("Scheduler already running")
            return
        self._stopping.clear()
        self._executor = ThreadPoolExecutor(max_workers=self.pool_size, thread_name_prefix=self.name)
        self._timer = threading.Thread(target=self._timing_loop, name=f"{self.name}-timer", daemon=True)
        self._timer.start()

    def _run(self, task: PeriodicTask) -> None:
        try:
            task.func()
        except Exception:
            task.failures += 1
            logger.exception("Scheduled task %s failed", task.name)

    def _timing_loop(self) -> None:
        while not self._stopping.is_set():
            now = time.monotonic()
            next_due = now + 1.0
            with self._lock:
                tasks = list(self._tasks.values())
            for task in tasks:
                if task.next_run <= now:
                    if task.in_flight:
                        task.skipped += 1
                        logger.debug("Skipping %s tick, previous run still in flight", task.name)
                    else:
                        try:
                            task.future = self._executor.submit(self._run, task)
                            task.runs += 1
                        except RuntimeError:
                            # Executor shut down underneath us
                            return
                    task.next_run = now + task.interval
                next_due = min(next_due, task.next_run)
            self._wakeup.wait(max(0.0, next_due - time.monotonic()))
            self._wakeup.clear()

    def shutdown(self, timeout: float = None) -> bool:
        """
        Stop scheduling and wait for in-flight runs.

        Returns True when every run finished within ``timeout`` seconds
        (default ``Config.SHUTDOWN_GRACE_PERIOD``). Otherwise pending runs are
        cancelled and False is returned; runs already executing cannot be
        interrupted and finish on their own.
        """
        if timeout is None:
            timeout = Config.SHUTDOWN_GRACE_PERIOD
        deadline = time.monotonic() + timeout
        self._stopping.set()
        self._wakeup.set()
        timer, self._timer = self._timer, None
        if timer is not None and timer is not threading.current_thread():
            timer.join(timeout)
        remaining = max(0.0, deadline - time.monotonic())

        executor, self._executor = self._executor, None
        if executor is None:
            return True

        futures = [task.future for task in self.tasks() if task.future is not None]
        _, not_done = wait(futures, timeout=remaining)
        if not_done:
            logger.warning("%d scheduled run(s) still busy after %.1fs, cancelling", len(not_done), timeout)
            executor.shutdown(wait=False, cancel_futures=True)
            return False
        executor.shutdown(wait=True)
        return True

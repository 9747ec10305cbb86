"""Host availability probes for templates."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence

from .models import Template

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05
KILL_GRACE_PERIOD = 1.0
MAX_PARALLEL_CHECKS = 8

_IS_POSIX = os.name == "posix"


class Operation:
    """Cancellation handle shared by every probe of one availability check.

    The operation ends when :meth:`cancel` is called or, if a timeout was
    given, once the deadline passes.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set() or self.expired

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())


def _signal_process(proc: subprocess.Popen, sig: int) -> None:
    try:
        if _IS_POSIX:
            os.killpg(proc.pid, sig)
        elif sig == signal.SIGTERM:
            proc.terminate()
        else:
            proc.kill()
    except ProcessLookupError:
        pass


def _terminate(proc: subprocess.Popen) -> None:
    _signal_process(proc, signal.SIGTERM)
    try:
        proc.wait(timeout=KILL_GRACE_PERIOD)
    except subprocess.TimeoutExpired:
        _signal_process(proc, getattr(signal, "SIGKILL", signal.SIGTERM))
        proc.wait()


def _poll_timeout(operation: Operation) -> float:
    remaining = operation.remaining()
    if remaining is None:
        return POLL_INTERVAL
    return max(0.0, min(POLL_INTERVAL, remaining))


def run_probe(command: Sequence[str], operation: Operation) -> bool:
    """Run one probe command and report whether it exited with status 0.

    A command that cannot be started counts as a failed probe. If *operation*
    ends while the probe runs, its process group is terminated.
    """
    if operation.cancelled:
        return False

    try:
        proc = subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=_IS_POSIX,
        )
    except OSError as exc:
        logger.debug("Probe %s could not start: %s", list(command), exc)
        return False

    while True:
        try:
            code = proc.wait(timeout=_poll_timeout(operation))
        except subprocess.TimeoutExpired:
            if operation.cancelled:
                logger.debug("Probe %s cancelled, terminating pid %s", list(command), proc.pid)
                _terminate(proc)
                return False
            continue
        if code != 0:
            logger.debug("Probe %s exited with %s", list(command), code)
        return code == 0


def is_available(template: Template, operation: Optional[Operation] = None) -> bool:
    operation = operation if operation is not None else Operation()
    for command in template.check:
        if not run_probe(command, operation):
            return False
    return True


def check_all(templates: Dict[str, Template], timeout: Optional[float] = None) -> Dict[str, bool]:
    """Check many templates concurrently, each under its own operation."""
    if not templates:
        return {}

    names = list(templates)
    workers = min(MAX_PARALLEL_CHECKS, len(names))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = pool.map(lambda name: is_available(templates[name], Operation(timeout)), names)
        return dict(zip(names, results))

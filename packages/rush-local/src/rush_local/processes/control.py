"""Liveness probing and termination of processes by pid."""

from __future__ import annotations

import logging
import os
import signal

from rush_local.errors import InvalidPid

logger = logging.getLogger(__name__)


def _parse_pid(pid: str | int) -> int | None:
    try:
        value = int(pid)
    except (TypeError, ValueError):
        return None
    # 0 and negative pids address process groups, never a single process.
    return value if value > 0 else None


def process_alive(pid: str | int) -> bool:
    """Return True if a process with ``pid`` exists right now."""
    value = _parse_pid(pid)
    if value is None:
        return False
    try:
        os.kill(value, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def kill_process(pid: str | int) -> None:
    """Send SIGTERM to ``pid``. OS refusals propagate."""
    value = _parse_pid(pid)
    if value is None:
        raise InvalidPid(f"invalid pid: {pid!r}")
    logger.info("Sending SIGTERM to %d", value)
    os.kill(value, signal.SIGTERM)

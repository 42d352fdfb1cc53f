"""Recursive disk usage measurement."""

from __future__ import annotations

import re
import shlex
import subprocess
from typing import Protocol, runtime_checkable

from rush_local.errors import SizeProbeError

DEFAULT_DU_COMMAND = "du -sb"

_LEADING_INT = re.compile(r"^\s*(\d+)")


@runtime_checkable
class DiskUsageProbe(Protocol):
    """Anything that can measure the recursive byte size of a path."""

    def measure(self, path: str) -> int: ...


class DuProbe:
    """Disk usage probe backed by the ``du`` utility."""

    def __init__(self, command: str = DEFAULT_DU_COMMAND) -> None:
        self._argv = shlex.split(command)

    def measure(self, path: str) -> int:
        try:
            proc = subprocess.run(
                [*self._argv, "--", path],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise SizeProbeError(f"cannot run {self._argv[0]}: {e}", cause=e) from e
        if proc.returncode != 0:
            raise SizeProbeError(
                f"{self._argv[0]} exited {proc.returncode}: {proc.stderr.strip()}"
            )
        return parse_du_output(proc.stdout)


def parse_du_output(output: str) -> int:
    """Extract the byte count from the first line of ``du -s`` output."""
    match = _LEADING_INT.match(output)
    if match is None:
        raise SizeProbeError(f"unparsable du output: {output[:80]!r}")
    return int(match.group(1))


def size(path: str, probe: DiskUsageProbe | None = None) -> int:
    return (probe or DuProbe()).measure(path)

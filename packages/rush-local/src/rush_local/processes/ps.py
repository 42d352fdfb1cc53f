"""Process table reader backed by the ``ps`` command, for systems without /proc."""

from __future__ import annotations

import os
import subprocess
from typing import Callable

from rush_local.errors import ProcessListError
from rush_local.types import ProcessRecord

DEFAULT_COLUMNS = 9999

PS_ARGV = ["ps", "ax", "-o", "pid uid rss cpu command"]


def run_ps(columns: int = DEFAULT_COLUMNS) -> str:
    """Run ``ps`` with a wide terminal so command lines are not truncated."""
    env = {**os.environ, "COLUMNS": str(columns)}
    try:
        proc = subprocess.run(PS_ARGV, capture_output=True, text=True, env=env, check=False)
    except OSError as e:
        raise ProcessListError(f"cannot run ps: {e}", cause=e) from e
    if proc.returncode != 0:
        raise ProcessListError(f"ps exited {proc.returncode}: {proc.stderr.strip()}")
    return proc.stdout


def _to_int(value: str) -> int:
    return int(value) if value.isdigit() else 0


def parse_ps_line(line: str) -> ProcessRecord:
    """Parse one ``pid uid rss cpu command`` row.

    Only the first four columns are split; the command line keeps its
    embedded whitespace.
    """
    fields = line.split(None, 4)
    fields += [""] * (5 - len(fields))
    pid, uid, mem, cpu, cmdline = fields
    cmdline = cmdline.strip()
    command = cmdline.split(None, 1)[0] if cmdline else ""
    return ProcessRecord(
        pid=pid,
        uid=_to_int(uid),
        command=command,
        cmdline=cmdline,
        mem=_to_int(mem),
        cpu=_to_int(cpu),
    )


def parse_ps_output(output: str) -> list[ProcessRecord]:
    lines = output.splitlines()[1:]
    return [parse_ps_line(line) for line in lines if line.strip()]


class CommandTableSource:
    """Process source that parses ``ps`` output."""

    def __init__(
        self,
        lister: Callable[[], str] | None = None,
        columns: int = DEFAULT_COLUMNS,
    ) -> None:
        self._lister = lister or (lambda: run_ps(columns))

    def list(self) -> list[ProcessRecord]:
        return parse_ps_output(self._lister())

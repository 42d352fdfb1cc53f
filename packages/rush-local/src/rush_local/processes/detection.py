"""Platform detection for the process table source."""

from __future__ import annotations

import os

from rush_local.processes.base import ProcessSource
from rush_local.processes.proc import DEFAULT_PROC_ROOT, ProcTableSource
from rush_local.processes.ps import DEFAULT_COLUMNS, CommandTableSource
from rush_local.types import ProcessRecord


def detect_source(
    proc_root: str = DEFAULT_PROC_ROOT, ps_columns: int = DEFAULT_COLUMNS
) -> ProcessSource:
    """Use the proc filesystem when present, else fall back to ``ps``."""
    if os.path.isdir(proc_root):
        return ProcTableSource(proc_root)
    return CommandTableSource(columns=ps_columns)


def processes(source: ProcessSource | None = None) -> list[ProcessRecord]:
    return (source or detect_source()).list()

"""Process inventory: enumeration, liveness and termination."""

from rush_local.processes.base import ProcessSource
from rush_local.processes.control import kill_process, process_alive
from rush_local.processes.detection import detect_source, processes
from rush_local.processes.proc import ProcTableSource
from rush_local.processes.ps import CommandTableSource

__all__ = [
    "CommandTableSource",
    "ProcTableSource",
    "ProcessSource",
    "detect_source",
    "kill_process",
    "process_alive",
    "processes",
]

"""Agent configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from rush_local.processes.proc import DEFAULT_PROC_ROOT
from rush_local.processes.ps import DEFAULT_COLUMNS
from rush_local.size import DEFAULT_DU_COMMAND


@dataclass
class AgentConfig:
    log_level: str = "INFO"
    proc_root: str = DEFAULT_PROC_ROOT
    du_command: str = DEFAULT_DU_COMMAND
    ps_columns: int = DEFAULT_COLUMNS

    @classmethod
    def from_env(cls) -> AgentConfig:
        return cls(
            log_level=os.getenv("RUSH_LOG_LEVEL", "INFO").upper(),
            proc_root=os.getenv("RUSH_PROC_ROOT", DEFAULT_PROC_ROOT),
            du_command=os.getenv("RUSH_DU_COMMAND", DEFAULT_DU_COMMAND),
            ps_columns=int(os.getenv("RUSH_PS_COLUMNS", str(DEFAULT_COLUMNS))),
        )

"""Core record types produced by local operations."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class StatRecord:
    """Point-in-time stat of a filesystem entry.

    ``size`` is the entry's own size; for directories it is not the size of
    their contents (see ``rush_local.size``).
    """

    size: int
    ctime: datetime
    atime: datetime
    mtime: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "ctime": self.ctime.isoformat(),
            "atime": self.atime.isoformat(),
            "mtime": self.mtime.isoformat(),
        }


@dataclass(frozen=True)
class ProcessRecord:
    pid: str
    uid: int
    command: str
    cmdline: str
    mem: int = 0  # resident KiB
    cpu: int = 0  # accumulated ticks

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

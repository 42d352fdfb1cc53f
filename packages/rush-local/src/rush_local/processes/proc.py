"""Process table reader backed by the Linux proc filesystem."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rush_local.types import ProcessRecord

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = "/proc"

# Offsets into the fields following the ")" that closes the command name.
# That remainder starts at field 3 (state) of proc(5)'s numbering.
_UTIME = 14 - 3
_STIME = 15 - 3
_RSS = 24 - 3


def _page_kib() -> int:
    return os.sysconf("SC_PAGE_SIZE") // 1024


def parse_stat_line(line: str) -> tuple[str, str, int, int]:
    """Parse a ``/proc/<pid>/stat`` line into (pid, command, cpu ticks, rss pages).

    The command name sits in parentheses and may itself contain spaces or
    parentheses, so parsing anchors on the last ``)``.
    """
    open_paren = line.index("(")
    close_paren = line.rindex(")")
    pid = line[:open_paren].strip()
    command = line[open_paren + 1 : close_paren]
    rest = line[close_paren + 1 :].split()
    cpu = int(rest[_UTIME]) + int(rest[_STIME])
    rss_pages = int(rest[_RSS])
    return pid, command, cpu, rss_pages


def parse_cmdline(raw: bytes) -> str:
    args = [a for a in raw.split(b"\0") if a]
    return " ".join(a.decode(errors="replace") for a in args)


class ProcTableSource:
    """Reads every numeric entry under the proc root.

    Processes that exit between the directory listing and reading their
    files are skipped.
    """

    def __init__(self, root: str = DEFAULT_PROC_ROOT, page_kib: int | None = None) -> None:
        self._root = Path(root)
        self._page_kib = page_kib if page_kib is not None else _page_kib()

    def list(self) -> list[ProcessRecord]:
        records: list[ProcessRecord] = []
        for entry in self._root.iterdir():
            if not entry.name.isdigit():
                continue
            try:
                records.append(self.read_entry(entry))
            except OSError as e:
                logger.debug("Skipping process %s: %s", entry.name, e)
        return records

    def read_entry(self, entry: Path) -> ProcessRecord:
        stat_file = entry / "stat"
        line = stat_file.read_text()
        uid = stat_file.stat().st_uid
        pid, command, cpu, rss_pages = parse_stat_line(line)
        cmdline = parse_cmdline((entry / "cmdline").read_bytes())
        return ProcessRecord(
            pid=pid,
            uid=uid,
            command=command,
            cmdline=cmdline,
            mem=rss_pages * self._page_kib,
            cpu=cpu,
        )

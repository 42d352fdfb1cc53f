"""Routes action requests to local operations and serializes their results."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from rush_local import archive, fs
from rush_local.config import AgentConfig
from rush_local.errors import InvalidRequest, RushError, from_os_error
from rush_local.processes import ProcessSource, detect_source, kill_process, process_alive
from rush_local.requests import (
    Action,
    BaseRequest,
    CopyRequest,
    CreateDirRequest,
    DestroyRequest,
    FileContentsRequest,
    IndexRequest,
    KillProcessRequest,
    ProcessAliveRequest,
    ProcessesRequest,
    ReadArchiveRequest,
    RenameRequest,
    SizeRequest,
    StatRequest,
    WriteArchiveRequest,
    WriteFileRequest,
    decode_request,
)
from rush_local.size import DiskUsageProbe, DuProbe, size

logger = logging.getLogger(__name__)


def _json(value: Any) -> bytes:
    return json.dumps(value).encode()


class Dispatcher:
    """Executes exactly one local operation per request.

    Results come back as bytes: raw contents for files and archives, one
    line per entry for indexes, JSON for stat and process records, ``1`` or
    ``0`` for liveness and empty bytes for operations with no result.
    """

    def __init__(
        self,
        disk_usage: DiskUsageProbe | None = None,
        process_source: ProcessSource | None = None,
    ) -> None:
        self._disk_usage = disk_usage or DuProbe()
        self._process_source = process_source or detect_source()
        self._handlers: dict[Action, Callable[[Any], bytes]] = {
            Action.WRITE_FILE: self._write_file,
            Action.FILE_CONTENTS: self._file_contents,
            Action.DESTROY: self._destroy,
            Action.CREATE_DIR: self._create_dir,
            Action.RENAME: self._rename,
            Action.COPY: self._copy,
            Action.READ_ARCHIVE: self._read_archive,
            Action.WRITE_ARCHIVE: self._write_archive,
            Action.INDEX: self._index,
            Action.STAT: self._stat,
            Action.SIZE: self._size,
            Action.PROCESSES: self._processes,
            Action.PROCESS_ALIVE: self._process_alive,
            Action.KILL_PROCESS: self._kill_process,
        }

    @classmethod
    def from_config(cls, config: AgentConfig) -> Dispatcher:
        return cls(
            disk_usage=DuProbe(config.du_command),
            process_source=detect_source(config.proc_root, config.ps_columns),
        )

    def actions(self) -> list[Action]:
        return list(self._handlers)

    def receive(self, params: Mapping[str, Any]) -> bytes:
        """Decode a raw parameter mapping and dispatch it."""
        return self.dispatch(decode_request(params))

    def dispatch(self, request: BaseRequest) -> bytes:
        action = Action(request.action)
        handler = self._handlers[action]
        logger.debug("Dispatching %s", action.value)
        try:
            return handler(request)
        except RushError as e:
            if e.action is None:
                e.action = action.value
            logger.warning("%s failed: %s", action.value, e)
            raise
        except OSError as e:
            err = from_os_error(e, action=action.value)
            logger.warning("%s failed: %s", action.value, err)
            raise err from e
        except ValueError as e:
            # embedded NUL byte in a path
            err = InvalidRequest(str(e), action=action.value, cause=e)
            logger.warning("%s failed: %s", action.value, err)
            raise err from e

    # Handlers

    def _write_file(self, r: WriteFileRequest) -> bytes:
        fs.write_file(r.full_path, r.payload)
        return b""

    def _file_contents(self, r: FileContentsRequest) -> bytes:
        return fs.file_contents(r.full_path)

    def _destroy(self, r: DestroyRequest) -> bytes:
        fs.destroy(r.full_path)
        return b""

    def _create_dir(self, r: CreateDirRequest) -> bytes:
        fs.create_dir(r.full_path)
        return b""

    def _rename(self, r: RenameRequest) -> bytes:
        fs.rename(r.path, r.name, r.new_name)
        return b""

    def _copy(self, r: CopyRequest) -> bytes:
        fs.copy(r.src, r.dst)
        return b""

    def _read_archive(self, r: ReadArchiveRequest) -> bytes:
        return archive.read_archive(r.full_path)

    def _write_archive(self, r: WriteArchiveRequest) -> bytes:
        archive.write_archive(r.payload, r.dir)
        return b""

    def _index(self, r: IndexRequest) -> bytes:
        entries = fs.index(r.base_path, r.glob)
        return "".join(f"{e}\n" for e in entries).encode()

    def _stat(self, r: StatRequest) -> bytes:
        return _json(fs.stat(r.full_path).to_dict())

    def _size(self, r: SizeRequest) -> bytes:
        return str(size(r.full_path, self._disk_usage)).encode()

    def _processes(self, r: ProcessesRequest) -> bytes:
        return _json([p.to_dict() for p in self._process_source.list()])

    def _process_alive(self, r: ProcessAliveRequest) -> bytes:
        return b"1" if process_alive(r.pid) else b"0"

    def _kill_process(self, r: KillProcessRequest) -> bytes:
        kill_process(r.pid)
        return b""

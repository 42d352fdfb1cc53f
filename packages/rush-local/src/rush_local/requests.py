"""Typed action requests decoded from flat parameter mappings."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from rush_local.errors import InvalidRequest, UnknownAction


class Action(str, Enum):
    WRITE_FILE = "write_file"
    FILE_CONTENTS = "file_contents"
    DESTROY = "destroy"
    CREATE_DIR = "create_dir"
    RENAME = "rename"
    COPY = "copy"
    READ_ARCHIVE = "read_archive"
    WRITE_ARCHIVE = "write_archive"
    INDEX = "index"
    STAT = "stat"
    SIZE = "size"
    PROCESSES = "processes"
    PROCESS_ALIVE = "process_alive"
    KILL_PROCESS = "kill_process"


class BaseRequest(BaseModel):
    # Missing parameters default to empty values; each operation decides
    # whether that is acceptable.
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    action: str = ""

    @field_validator("*")
    @classmethod
    def _no_nul_bytes(cls, value: Any) -> Any:
        if isinstance(value, str) and "\x00" in value:
            raise ValueError("embedded null byte")
        return value


class WriteFileRequest(BaseRequest):
    action: Literal["write_file"] = "write_file"
    full_path: str = ""
    payload: bytes = b""


class FileContentsRequest(BaseRequest):
    action: Literal["file_contents"] = "file_contents"
    full_path: str = ""


class DestroyRequest(BaseRequest):
    action: Literal["destroy"] = "destroy"
    full_path: str = ""


class CreateDirRequest(BaseRequest):
    action: Literal["create_dir"] = "create_dir"
    full_path: str = ""


class RenameRequest(BaseRequest):
    action: Literal["rename"] = "rename"
    path: str = ""
    name: str = ""
    new_name: str = ""


class CopyRequest(BaseRequest):
    action: Literal["copy"] = "copy"
    src: str = ""
    dst: str = ""


class ReadArchiveRequest(BaseRequest):
    action: Literal["read_archive"] = "read_archive"
    full_path: str = ""


class WriteArchiveRequest(BaseRequest):
    action: Literal["write_archive"] = "write_archive"
    payload: bytes = b""
    dir: str = ""


class IndexRequest(BaseRequest):
    action: Literal["index"] = "index"
    base_path: str = ""
    glob: str = ""


class StatRequest(BaseRequest):
    action: Literal["stat"] = "stat"
    full_path: str = ""


class SizeRequest(BaseRequest):
    action: Literal["size"] = "size"
    full_path: str = ""


class ProcessesRequest(BaseRequest):
    action: Literal["processes"] = "processes"


class ProcessAliveRequest(BaseRequest):
    action: Literal["process_alive"] = "process_alive"
    pid: str = ""


class KillProcessRequest(BaseRequest):
    action: Literal["kill_process"] = "kill_process"
    pid: str = ""


ActionRequest = Annotated[
    Union[
        WriteFileRequest,
        FileContentsRequest,
        DestroyRequest,
        CreateDirRequest,
        RenameRequest,
        CopyRequest,
        ReadArchiveRequest,
        WriteArchiveRequest,
        IndexRequest,
        StatRequest,
        SizeRequest,
        ProcessesRequest,
        ProcessAliveRequest,
        KillProcessRequest,
    ],
    Field(discriminator="action"),
]

REQUEST_TYPES: dict[Action, type[BaseRequest]] = {
    Action.WRITE_FILE: WriteFileRequest,
    Action.FILE_CONTENTS: FileContentsRequest,
    Action.DESTROY: DestroyRequest,
    Action.CREATE_DIR: CreateDirRequest,
    Action.RENAME: RenameRequest,
    Action.COPY: CopyRequest,
    Action.READ_ARCHIVE: ReadArchiveRequest,
    Action.WRITE_ARCHIVE: WriteArchiveRequest,
    Action.INDEX: IndexRequest,
    Action.STAT: StatRequest,
    Action.SIZE: SizeRequest,
    Action.PROCESSES: ProcessesRequest,
    Action.PROCESS_ALIVE: ProcessAliveRequest,
    Action.KILL_PROCESS: KillProcessRequest,
}

_adapter: TypeAdapter[Any] = TypeAdapter(ActionRequest)

_ACTION_NAMES = frozenset(a.value for a in Action)


def parameter_names(action: Action) -> list[str]:
    """Return the parameter names an action reads, in declaration order."""
    return [name for name in REQUEST_TYPES[action].model_fields if name != "action"]


def decode_request(params: Mapping[str, Any]) -> BaseRequest:
    """Validate a raw parameter mapping into its typed request.

    ``None`` values are treated as absent.
    """
    action = params.get("action")
    if not isinstance(action, str) or action not in _ACTION_NAMES:
        raise UnknownAction(f"unknown action: {action!r}")
    data = {k: v for k, v in params.items() if v is not None}
    try:
        return _adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidRequest(str(e), action=action, cause=e) from e

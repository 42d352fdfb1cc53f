"""Local action layer for the rush remote-shell protocol."""

from rush_local.config import AgentConfig
from rush_local.dispatcher import Dispatcher
from rush_local.errors import (
    AccessDenied,
    ArchiveError,
    DestroyRootRefused,
    InvalidPid,
    InvalidRequest,
    NameAlreadyExists,
    NameCannotContainSlash,
    NotADir,
    NotFound,
    ProcessListError,
    ResourceError,
    RushError,
    SizeProbeError,
    UnknownAction,
)
from rush_local.logging_config import setup_logging
from rush_local.requests import Action, decode_request
from rush_local.types import ProcessRecord, StatRecord

__all__ = [
    "AccessDenied",
    "Action",
    "AgentConfig",
    "ArchiveError",
    "DestroyRootRefused",
    "Dispatcher",
    "InvalidPid",
    "InvalidRequest",
    "NameAlreadyExists",
    "NameCannotContainSlash",
    "NotADir",
    "NotFound",
    "ProcessListError",
    "ProcessRecord",
    "ResourceError",
    "RushError",
    "SizeProbeError",
    "StatRecord",
    "UnknownAction",
    "decode_request",
    "setup_logging",
]

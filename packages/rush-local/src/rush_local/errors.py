"""Error hierarchy for the local action layer."""

from __future__ import annotations

from typing import Any


class RushError(Exception):
    """Base error for all action failures."""

    code = "rush_error"

    def __init__(
        self,
        message: str = "",
        *,
        action: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.__class__.__name__)
        self.action = action
        self.cause = cause

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "action": self.action,
        }


# Protocol errors

class UnknownAction(RushError):
    code = "unknown_action"


class InvalidRequest(RushError):
    code = "invalid_request"


# Validation errors

class NameCannotContainSlash(RushError):
    code = "name_cannot_contain_slash"


class NameAlreadyExists(RushError):
    code = "name_already_exists"


class DestroyRootRefused(RushError):
    code = "destroy_root_refused"


class NotADir(RushError):
    code = "not_a_dir"


class InvalidPid(RushError):
    code = "invalid_pid"


# Resource errors

class NotFound(RushError):
    code = "not_found"


class AccessDenied(RushError):
    code = "access_denied"


class ResourceError(RushError):
    code = "resource_error"


class SizeProbeError(RushError):
    code = "size_probe_error"


class ArchiveError(RushError):
    code = "archive_error"


class ProcessListError(RushError):
    code = "process_list_error"


def from_os_error(exc: OSError, *, action: str | None = None) -> RushError:
    """Translate an OSError raised by an operation into a typed error."""
    message = exc.strerror or str(exc)
    if exc.filename is not None:
        message = f"{message}: {exc.filename}"
    if isinstance(exc, (FileNotFoundError, ProcessLookupError)):
        return NotFound(message, action=action, cause=exc)
    if isinstance(exc, PermissionError):
        return AccessDenied(message, action=action, cause=exc)
    return ResourceError(message, action=action, cause=exc)

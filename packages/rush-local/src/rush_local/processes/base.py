"""Process source protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rush_local.types import ProcessRecord


@runtime_checkable
class ProcessSource(Protocol):
    """Interface for all process table readers."""

    def list(self) -> list[ProcessRecord]: ...

"""Primitive filesystem operations on absolute paths."""

from __future__ import annotations

import glob as globlib
import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from rush_local.errors import (
    DestroyRootRefused,
    NameAlreadyExists,
    NameCannotContainSlash,
    NotADir,
)
from rush_local.types import StatRecord

logger = logging.getLogger(__name__)

_SEPARATORS = tuple(s for s in {"/", os.sep, os.altsep} if s)


def write_file(path: str, contents: bytes | str) -> None:
    """Create or truncate ``path`` and write ``contents`` to it."""
    if isinstance(contents, str):
        contents = contents.encode()
    Path(path).write_bytes(contents)


def file_contents(path: str) -> bytes:
    return Path(path).read_bytes()


def _is_root(path: str) -> bool:
    resolved = os.path.realpath(path)
    return os.path.dirname(resolved) == resolved


def destroy(path: str) -> None:
    """Remove a file or directory tree. Missing paths are ignored.

    Anything resolving to a filesystem root is refused before touching the
    disk, as is an empty path (it would resolve to the working directory).
    """
    if not path or _is_root(path):
        raise DestroyRootRefused(f"refusing to destroy {path!r}")
    if not os.path.lexists(path):
        return
    logger.info("Destroying %s", path)
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def create_dir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def rename(parent: str, old_name: str, new_name: str) -> None:
    """Rename ``old_name`` to ``new_name`` inside ``parent``."""
    if any(sep in new_name for sep in _SEPARATORS):
        raise NameCannotContainSlash(f"new name {new_name!r} contains a path separator")
    old_path = os.path.join(parent, old_name)
    new_path = os.path.join(parent, new_name)
    if os.path.lexists(new_path):
        raise NameAlreadyExists(f"{new_path} already exists")
    os.rename(old_path, new_path)


def copy(src: str, dst: str) -> None:
    """Recursively copy ``src`` to ``dst``, like ``cp -r``.

    When ``dst`` is an existing directory the copy lands inside it under the
    source's own name. Copying a tree over an earlier copy merges into it.
    """
    target = dst
    if os.path.isdir(dst):
        target = os.path.join(dst, os.path.basename(os.path.normpath(src)))
    if os.path.isdir(src) and not os.path.islink(src):
        shutil.copytree(src, target, symlinks=True, dirs_exist_ok=True)
    else:
        shutil.copy2(src, target, follow_symlinks=False)


def index(base_path: str, glob: str | None = None) -> list[str]:
    """List entries under ``base_path`` matching ``glob``.

    An empty glob means ``*``. Only a ``**`` in the pattern recurses.
    Directories come first and carry a trailing ``/``.
    """
    if not os.path.isdir(base_path):
        raise NotADir(f"{base_path} is not a directory")
    pattern = glob or "*"
    dirs: list[str] = []
    files: list[str] = []
    for name in globlib.glob(pattern, root_dir=base_path, recursive=True):
        name = name.rstrip(os.sep)
        if not name:
            continue
        if os.path.isdir(os.path.join(base_path, name)):
            dirs.append(name + "/")
        else:
            files.append(name)
    return dirs + files


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def stat(path: str) -> StatRecord:
    s = os.stat(path)
    return StatRecord(
        size=s.st_size,
        ctime=_timestamp(s.st_ctime),
        atime=_timestamp(s.st_atime),
        mtime=_timestamp(s.st_mtime),
    )

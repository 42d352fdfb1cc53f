"""Tar-stream transfer of files and directory trees.

An archive carries its own root name: packing ``/a/b/project`` produces a
stream whose single top-level entry is ``project``, and unpacking it into
``/c`` recreates ``/c/project``. The receiving side never needs the name.
"""

from __future__ import annotations

import errno
import io
import logging
import os
import tarfile
from typing import BinaryIO

from rush_local.errors import ArchiveError, NotADir

logger = logging.getLogger(__name__)


def stream_archive(path: str, fileobj: BinaryIO) -> None:
    """Write a tar stream of ``path`` into ``fileobj``.

    An empty path or a filesystem root has no name to carry and is refused.
    """
    name = os.path.basename(os.path.abspath(path)) if path else ""
    if not name:
        raise ArchiveError(f"refusing to archive {path!r}")
    path = os.path.normpath(path)
    os.lstat(path)
    with tarfile.open(fileobj=fileobj, mode="w|", format=tarfile.PAX_FORMAT) as tar:
        tar.add(path, arcname=name)


def read_archive(path: str) -> bytes:
    buf = io.BytesIO()
    stream_archive(path, buf)
    return buf.getvalue()


def write_archive(archive: bytes | BinaryIO, dest_dir: str) -> None:
    """Unpack a tar stream into ``dest_dir``.

    Members that would land outside ``dest_dir`` are rejected.
    """
    if not os.path.exists(dest_dir):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), dest_dir)
    if not os.path.isdir(dest_dir):
        raise NotADir(f"{dest_dir} is not a directory")
    if isinstance(archive, (bytes, bytearray, memoryview)):
        archive = io.BytesIO(archive)
    logger.info("Extracting archive into %s", dest_dir)
    try:
        with tarfile.open(fileobj=archive, mode="r|") as tar:
            tar.extractall(dest_dir, filter="data")
    except tarfile.TarError as e:
        raise ArchiveError(f"cannot extract archive: {e}", cause=e) from e

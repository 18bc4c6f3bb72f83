"""
File plumbing for Cryptr

Inputs are opened through scoped handles, outputs are written to a hidden
temporary sibling and moved over the destination only when the whole
operation succeeded. A failed encrypt/decrypt/wrap therefore never leaves a
file behind that looks like a valid result.

Outputs get ordinary file permissions: a new file follows the process umask,
an overwritten file keeps the mode it had.
"""

from __future__ import annotations

import logging
import os
import stat
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Tuple

from .exceptions import FileAccessError


logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024  # 1 KiB working buffer, as the key/content loops use


def _describe(err: OSError) -> str:
    return err.strerror or str(err)


class GuardedFile:
    """
    Thin proxy over an open binary file.

    ``read`` and ``write`` turn ``OSError`` into :class:`FileAccessError`
    naming the file and direction, so a failing input is never reported as
    a failing output (or the reverse). Everything else is delegated.
    """

    def __init__(self, raw: BinaryIO, path: Path, action: str):
        self._raw = raw
        self._path = path
        self._action = action

    def _error(self, err: OSError) -> FileAccessError:
        return FileAccessError(f"cannot {self._action} {self._path}: {_describe(err)}")

    def read(self, size: int = -1) -> bytes:
        try:
            return self._raw.read(size)
        except OSError as e:
            raise self._error(e) from e

    def write(self, data: bytes) -> int:
        try:
            return self._raw.write(data)
        except OSError as e:
            raise self._error(e) from e

    def __getattr__(self, name):
        return getattr(self._raw, name)


def read_bytes(path: str | Path) -> bytes:
    """Read a whole (small) file such as a key file."""
    src = Path(path)
    try:
        return src.read_bytes()
    except OSError as e:
        raise FileAccessError(f"cannot read {src}: {_describe(e)}") from e


@contextmanager
def open_input(path: str | Path) -> Iterator[GuardedFile]:
    """Open ``path`` for binary reading, translating OS errors."""
    src = Path(path)
    try:
        inf = open(src, "rb")
    except OSError as e:
        raise FileAccessError(f"cannot read {src}: {_describe(e)}") from e
    with inf:
        yield GuardedFile(inf, src, "read")


def _create_temp(dest: Path) -> Tuple[Path, BinaryIO]:
    # O_EXCL with 0o666 lets the kernel apply the umask, like a plain open()
    tmp_path = dest.parent / f".{dest.name}.{uuid.uuid4().hex}.tmp"
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
    return tmp_path, os.fdopen(fd, "wb")


@contextmanager
def atomic_output(path: str | Path) -> Iterator[GuardedFile]:
    """
    Yield a writable binary file that replaces ``path`` on clean exit.

    The data goes to a temporary file in the destination directory; on any
    exception the temporary file is removed and ``path`` is left untouched.
    If ``path`` already exists its permission bits are carried over.
    """
    dest = Path(path)
    try:
        tmp_path, outf = _create_temp(dest)
    except OSError as e:
        raise FileAccessError(f"cannot write {dest}: {_describe(e)}") from e

    committed = False
    try:
        with outf:
            yield GuardedFile(outf, dest, "write")
            try:
                outf.flush()
            except OSError as e:
                raise FileAccessError(f"cannot write {dest}: {_describe(e)}") from e
        try:
            if dest.exists():
                os.chmod(tmp_path, stat.S_IMODE(dest.stat().st_mode))
            os.replace(tmp_path, dest)
        except OSError as e:
            raise FileAccessError(f"cannot write {dest}: {_describe(e)}") from e
        committed = True
        logger.debug("wrote %s", dest)
    finally:
        if not committed:
            tmp_path.unlink(missing_ok=True)


def write_bytes(path: str | Path, data: bytes) -> None:
    with atomic_output(path) as outf:
        outf.write(data)

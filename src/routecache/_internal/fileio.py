"""Atomic file replacement.

Writes go to a temporary file in the target's directory and are renamed
over the target, so concurrent readers see either the old artifact or
the complete new one, never a half-written file.
"""

import contextlib
import os
import stat
import tempfile
from pathlib import Path


def _target_mode(target: Path) -> int:
    """Permission bits the replaced file should end up with.

    An existing target keeps its mode; a new one gets the same
    ``0o666 & ~umask`` a plain ``open()`` would give it.
    """
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_bytes(target: Path, payload: bytes) -> int:
    """Replace *target* with *payload*. Returns the number of bytes written.

    The target keeps its permission bits; ``mkstemp`` alone would leave
    it at 0600. Raises ``OSError`` on failure, including a short write.
    The temporary file is removed on any failure and *target* is left as
    it was.
    """
    mode = _target_mode(target)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=target.parent,
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            written = fh.write(payload)
            if written != len(payload):
                msg = f"short write: {written} of {len(payload)} bytes"
                raise OSError(msg)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
    return written

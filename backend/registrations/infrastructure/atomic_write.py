"""Atomic File Writes - temp file in the target directory, fsync, then os.replace.

Invariants:
    - The target path is either the complete old content or the complete new content
    - The temp file lives in the same directory as the target (same filesystem for rename)
    - On any failure the temp file is removed and AtomicWriteError is raised
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""


@contextmanager
def atomic_write(path: Path) -> Iterator[BinaryIO]:
    """Yield a binary handle; on clean exit, atomically replace `path` with its content.

    Example:
        with atomic_write(Path("data/registrations.xlsx")) as f:
            f.write(payload)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp",
    )
    temp_path = Path(temp_name)
    success = False
    try:
        with os.fdopen(fd, "wb") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
        success = True
        logger.debug("Atomic write committed", extra={"path": str(path)})
    except Exception as e:
        logger.error(
            f"Atomic write failed: {e}", extra={"path": str(path)},
        )
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e
    finally:
        if not success and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning(
                    "Could not remove temp file", extra={"path": str(temp_path)},
                )


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """Atomically replace `path` with `payload`."""
    with atomic_write(path) as f:
        f.write(payload)

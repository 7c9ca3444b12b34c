"""Writing rendered files into the project tree."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from .errors import FileWriteError

_DEFAULT_MODE = 0o644


def write_file(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories as needed.

    The text goes to a temporary sibling first and is moved into place with
    ``os.replace``, so an existing file is either left alone or fully
    replaced.  Returns the absolute path written.

    Raises:
        FileWriteError: A directory could not be created, the write failed,
            or *content* cannot be encoded as UTF-8.
    """
    target = Path(path).absolute()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise FileWriteError(target, exc) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        # mkstemp creates 0600 files; keep an existing file's mode instead.
        mode = target.stat().st_mode & 0o777 if target.exists() else _DEFAULT_MODE
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except (OSError, UnicodeError) as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise FileWriteError(target, exc) from exc
    return target


async def write_file_async(path: str | Path, content: str) -> Path:
    """``write_file`` run in a worker thread."""
    return await asyncio.to_thread(write_file, path, content)

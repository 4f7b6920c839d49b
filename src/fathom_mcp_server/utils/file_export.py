"""Write exported Markdown to disk."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_markdown(directory: str | Path, filename: str, content: str) -> Path:
    """Write `content` to `directory/filename` as UTF-8.

    The directory is created (recursively) if missing. The text is first
    written to a temporary file in the same directory and then moved over
    the target, so readers never observe a half-written file.

    Returns:
        Path of the written file.
    """

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / filename

    fd, tmp_name = tempfile.mkstemp(dir=target_dir, prefix=f".{filename}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target

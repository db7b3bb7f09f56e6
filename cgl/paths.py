"""Resolution of file names to absolute, canonical paths."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_path(filename: str | os.PathLike[str]) -> str:
    """Absolute path of ``filename`` with symbolic links resolved.

    Raises FileNotFoundError if the file does not exist.
    """
    return str(Path(filename).resolve(strict=True))
"""
Filesystem primitives.

A missing file is a normal ``None``/``False``/empty result, never an error.
"""

from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


def read(path: PathLike) -> Optional[str]:
    """Read a UTF-8 text file, or return None when it does not exist."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def write(path: PathLike, content: str) -> None:
    """Write a UTF-8 text file, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


def exists(path: PathLike) -> bool:
    return Path(path).exists()


def is_file(path: PathLike) -> bool:
    return Path(path).is_file()


def is_dir(path: PathLike) -> bool:
    return Path(path).is_dir()


def list_dir(path: PathLike) -> List[str]:
    """Sorted entry names of a directory; empty when it does not exist."""
    directory = Path(path)
    if not directory.is_dir():
        return []
    return sorted(entry.name for entry in directory.iterdir())

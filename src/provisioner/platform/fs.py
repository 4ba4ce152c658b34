"""
Filesystem operations used by the provisioning steps.
"""

import os
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def read_file(path: PathLike, encoding: str = "utf-8") -> str:
    """Read entire file as string."""
    with open(path, "r", encoding=encoding) as f:
        return f.read()


def write_private_file(
    path: PathLike,
    content: str,
    mode: int,
    encoding: str = "utf-8",
) -> None:
    """
    Write a file that is created with ``mode`` from the first byte.

    An existing file is truncated and re-moded; the umask never widens
    the permissions in between.
    """
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        os.fchmod(fd, mode)
        os.write(fd, content.encode(encoding))
    finally:
        os.close(fd)


def remove_if_exists(path: PathLike) -> bool:
    """Remove a file. Returns True if something was removed."""
    try:
        os.remove(str(path))
    except FileNotFoundError:
        return False
    return True


def is_file(path: PathLike) -> bool:
    """Check if path is a regular file."""
    return os.path.isfile(str(path))


def get_mode(path: PathLike) -> int:
    """Get the permission bits of a file."""
    return os.stat(str(path)).st_mode & 0o7777

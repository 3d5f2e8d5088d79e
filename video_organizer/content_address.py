"""
Content addresses for source files.

The address is the SHA-256 of the file's *path string*, not its bytes.
Two different files that share a path string get the same address, and
the same bytes under two paths get two addresses.
"""

import hashlib
import os
from typing import Union


def address_of(file_path: Union[str, "os.PathLike[str]"]) -> str:
    """
    Compute the content address used as a destination filename stem.

    Args:
        file_path: Path of the source file, as discovered

    Returns:
        Hex digest string
    """
    return hashlib.sha256(os.fspath(file_path).encode("utf-8")).hexdigest()

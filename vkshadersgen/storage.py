"""Binary file reading and incremental-build friendly file writing."""

import os
import tempfile
from pathlib import Path
from typing import Union

import numpy as np

from .logging_config import get_logger

logger = get_logger('vkshadersgen.storage')

PathLike = Union[str, Path]


def _empty() -> np.ndarray:
    return np.empty(0, dtype=np.uint8)


def _default_file_mode() -> int:
    """Mode a plain open() would create files with under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def read_binary_file(path: PathLike, may_not_exist: bool = False) -> np.ndarray:
    """Read a whole file as a uint8 array.

    Returns an empty array when the file cannot be opened or read. With
    ``may_not_exist`` the failure is expected and not reported.
    """
    try:
        f = open(path, 'rb')
    except OSError as e:
        if not may_not_exist:
            logger.error(f"Error opening file: {path} ({e.strerror})")
        return _empty()

    with f:
        try:
            return np.frombuffer(f.read(), dtype=np.uint8)
        except OSError as e:
            if not may_not_exist:
                logger.error(f"Error reading file: {path} ({e.strerror})")
            return _empty()


def write_binary_file(path: PathLike, data: Union[bytes, str]) -> bool:
    """Write ``data`` to ``path`` through a temp file and atomic rename."""
    if isinstance(data, str):
        data = data.encode('utf-8')

    target = Path(path)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='wb',
            dir=target.parent,
            prefix=f'.tmp_{target.name}_',
            delete=False
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            tmp_file.write(data)
    except OSError as e:
        logger.error(f"Error opening file for writing: {target} ({e.strerror})")
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        return False

    try:
        # NamedTemporaryFile creates files as 0600
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, target)
    except OSError as e:
        logger.error(f"Error writing file: {target} ({e.strerror})")
        tmp_path.unlink(missing_ok=True)
        return False

    logger.debug(f"Wrote {len(data)} bytes to {target}")
    return True


def write_file_if_changed(path: PathLike, content: str) -> bool:
    """Write ``content`` only if it differs from what is on disk.

    Returns True when the file was (re)written.
    """
    encoded = content.encode('utf-8')
    existing = read_binary_file(path, may_not_exist=True)
    if existing.size == len(encoded) and existing.tobytes() == encoded:
        logger.debug(f"{path} is up to date")
        return False
    return write_binary_file(path, encoded)

"""Utilities for file operations."""

import hashlib
from pathlib import Path
from typing import Union

from loguru import logger

FilePath = Union[Path, str]


def schema_fingerprint(content: Union[str, bytes]) -> str:
    """
    Compute the fingerprint of a schema source.

    Args:
        content: Schema text (either text string or bytes)

    Returns:
        "sha256:" followed by the first 8 bytes of the SHA-256 digest, hex encoded
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return "sha256:" + hashlib.sha256(content).hexdigest()[:16]


def read_schema_file(path: FilePath) -> str:
    """
    Read a schema file as UTF-8 text.

    Raises:
        OSError: If the file cannot be read
    """
    path_obj = Path(path)
    text = path_obj.read_text(encoding="utf-8")
    logger.debug(f"Read schema file {path_obj} ({len(text)} characters)")
    return text


def write_file_atomic(path: FilePath, content: str) -> None:
    """
    Write file with atomic operation using temporary file.

    The content goes to a temporary file in the target directory which then
    replaces the target, so readers never see a partially written module.

    Args:
        path: Target file path (Path or string)
        content: Content to write

    Raises:
        OSError: If the write or the rename fails
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path_obj.with_suffix(".tmp")

    try:
        with open(temp_path, mode="w", encoding="utf-8", newline="") as f:
            f.write(content)

        # Atomic rename
        temp_path.replace(path_obj)
    except OSError:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file {path_obj}")
        raise

    logger.debug(f"Wrote file atomically: {path_obj} ({len(content)} characters)")

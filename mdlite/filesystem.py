"""Reading documents and writing rendered HTML."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

SIZE_LIMIT_ENV_VAR = "MDLITE_MAX_FILE_SIZE"

logger = logging.getLogger(__name__)


def size_limit(default: int | None = None) -> int | None:
    """Return the document size limit in bytes set by ``MDLITE_MAX_FILE_SIZE``.

    `default` is returned when the variable is unset.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    raw = os.environ.get(SIZE_LIMIT_ENV_VAR)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(f"{SIZE_LIMIT_ENV_VAR} must be a number of bytes, got {raw!r}") from error
    if limit <= 0:
        raise ValueError(f"{SIZE_LIMIT_ENV_VAR} must be positive, got {limit}")
    return limit


def read_document(path: Path, limit: int | None = None) -> str:
    """Read a UTF-8 document.

    Line endings are kept as written so reported columns match the file.

    Args:
        path: Document to read.
        limit: Largest accepted size in bytes; None accepts any size.

    Returns:
        str: The document text.

    Raises:
        IOError: If the file cannot be read or is larger than `limit`.
        UnicodeDecodeError: If the file is not valid UTF-8.

    Examples:
        text = read_document(Path("README.md"), limit=1 << 20)
    """
    try:
        size = path.stat().st_size
        if limit is not None and size > limit:
            raise IOError(f"{path} is {size} bytes, over the limit of {limit} bytes")
        with open(path, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except (FileNotFoundError, IsADirectoryError, PermissionError) as error:
        raise IOError(f"Cannot read {path}: {error.strerror}") from error

    logger.debug("Read %d characters from %s", len(text), path)
    return text


def write_output(path: Path, html: str) -> None:
    """Replace `path` with `html` in one step.

    The HTML is written to a temporary file next to the real destination
    (symlinks are followed) and moved over it, so readers never see a partly
    written page. An existing destination keeps its permission bits.

    Raises:
        IOError: If the destination cannot be written.
    """
    target = path.resolve()
    mode = stat.S_IMODE(target.stat().st_mode) if target.exists() else None

    try:
        fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    except OSError as error:
        raise IOError(f"Cannot write {target}: {error}") from error

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(html)
        if mode is not None:
            os.chmod(temp_name, mode)
        os.replace(temp_name, target)
    except OSError as error:
        Path(temp_name).unlink(missing_ok=True)
        raise IOError(f"Cannot write {target}: {error}") from error

    logger.debug("Wrote %d characters to %s", len(html), target)

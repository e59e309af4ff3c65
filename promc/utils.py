"""Utility functions for reading configuration documents and writing output.

Configuration is read fully into memory; output is written through a
temporary file that only replaces the destination once it is complete.
"""

import os
import tempfile
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class DocumentLoadError(Exception):
    """Custom exception for configuration loading errors."""

    pass


class OutputWriteError(Exception):
    """Raised when the generated file cannot be written."""

    pass


def detect_format(file_path: str | Path) -> str:
    """Return ``yaml`` for .yaml/.yml files and ``json`` for anything else."""
    return "yaml" if Path(file_path).suffix.lower() in YAML_SUFFIXES else "json"


def load_document(file_path: str | Path) -> tuple[str, bytes]:
    """Load a configuration document from a local file.

    Args:
        file_path: Path to the configuration file.

    Returns:
        Tuple of (format name, raw file content).

    Raises:
        DocumentLoadError: If the file doesn't exist or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load configuration from file: {file_path}")

    if not file_path.is_file():
        logger.debug(f"File not found: {file_path}")
        raise DocumentLoadError(f"File not found: {file_path}")

    fmt = detect_format(file_path)
    if fmt == "json" and file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have a .json extension, reading as JSON: {file_path}")

    try:
        with file_path.open("rb") as f:
            content = f.read()
    except OSError as e:
        logger.debug(f"Error reading file {file_path}: {e}")
        raise DocumentLoadError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Loaded {len(content)} bytes of {fmt.upper()} from {file_path}")
    return fmt, content


def write_text_atomic(file_path: str | Path, text: str) -> Path:
    """Write text to a file so that readers never see a partial file.

    The text goes to a temporary file in the destination directory, which
    then replaces the destination. On failure the destination is untouched.

    Args:
        file_path: Destination path.
        text: Content to write.

    Returns:
        The destination path.

    Raises:
        OutputWriteError: If the directory is missing or the write fails.
    """
    file_path = Path(file_path)
    directory = file_path.parent if str(file_path.parent) else Path(".")

    if not directory.is_dir():
        raise OutputWriteError(f"Output directory does not exist: {directory}")

    fd, tmp_name = tempfile.mkstemp(
        dir=directory, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600 files; keep the destination's mode or use 0644
        mode = file_path.stat().st_mode & 0o777 if file_path.exists() else 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, file_path)
    except OSError as e:
        logger.debug(f"Error writing {file_path}: {e}")
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise OutputWriteError(f"Error writing {file_path}: {e}") from e

    logger.info(f"Wrote {file_path}")
    return file_path

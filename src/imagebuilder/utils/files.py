"""File helpers."""

from pathlib import Path

from .exceptions import ConfigurationError


def read_file(path: str) -> bytes:
    """Read a file (``~`` is expanded), raising ConfigurationError on failure."""
    if not path:
        raise ConfigurationError("file path must be specified")

    file_path = Path(path).expanduser()
    try:
        return file_path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"error reading file {str(file_path)!r}: {e}") from e

"""
Whole-file text I/O for the repository file.
"""

import os
import tempfile
from pathlib import Path


def read_file_to_string(path: str | Path, encoding: str = "utf-8") -> str:
    """
    Read the entire file as text.

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
    """
    return Path(path).read_text(encoding=encoding)


def write_string_to_file(path: str | Path, content: str, encoding: str = "utf-8") -> None:
    """
    Replace the file's content atomically.

    The text is written to a temporary file in the same directory and then
    renamed over the target, so readers see either the old or the new
    content, never a partial write.

    Raises:
        OSError: If the directory cannot be created or the file cannot be written
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

"""ID generation utilities."""
from pathlib import PurePosixPath, PureWindowsPath

from uuid6 import uuid7


def generate_stored_name(original_name: str) -> str:
    """Build a collision-resistant storage name for an uploaded file.

    The random part is a UUIDv7 (time-sortable), so files in a project
    directory list in upload order.
    """
    return f"{uuid7().hex}-{safe_basename(original_name)}"


def safe_basename(filename: str) -> str:
    """Strip any client-supplied directory components from a filename."""
    # Browsers on Windows may send the full path with backslashes
    name = PureWindowsPath(PurePosixPath(filename).name).name
    return name.strip() or "file"

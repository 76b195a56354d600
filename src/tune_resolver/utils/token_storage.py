"""
Owner-only JSON storage for provider session tokens.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


def ensure_private_dir(directory: Path) -> Path:
    directory.mkdir(exist_ok=True)
    if os.name == "posix":
        os.chmod(directory, stat.S_IRWXU)  # 700 permissions
    return directory


def save_session_file(path: Path, data: Dict[str, Any]) -> None:
    """
    Atomically write session data with 600 permissions.

    Raises:
        StorageError: If the file cannot be written
    """
    ensure_private_dir(path.parent)
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")

    try:
        with os.fdopen(temp_fd, "w") as temp_file:
            json.dump(data, temp_file, indent=2)

        if os.name == "posix":
            os.chmod(temp_path, stat.S_IRUSR | stat.S_IWUSR)  # 600 permissions

        os.replace(temp_path, path)
        logger.debug(f"Session data saved to {path}")

    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise StorageError(f"Error saving session data to {path}: {e}")


def load_session_file(path: Path) -> Optional[Dict[str, Any]]:
    """Load session data, or None if the file is missing or unreadable."""
    if not path.exists():
        logger.debug(f"No saved session at {path}")
        return None

    try:
        with open(path, "r") as file:
            data = json.load(file)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Error loading session from {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed session file {path}")
        return None
    return data


def clear_session_file(path: Path) -> bool:
    try:
        if path.exists():
            path.unlink()
            logger.info(f"Cleared saved session data at {path}")
        return True
    except OSError as e:
        logger.error(f"Error clearing session: {e}")
        return False

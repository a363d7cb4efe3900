"""
Artifact file operations inside the plugin directory.
"""

import logging
from pathlib import Path
from typing import Callable

from ..github.exceptions import FileSystemError

__all__ = ['ArtifactFileManager', 'ConfirmOverwrite', 'DEFAULT_PLUGINS_DIR']

logger = logging.getLogger(__name__)

DEFAULT_PLUGINS_DIR = Path("plugins")

ConfirmOverwrite = Callable[[Path], bool]


def _never_overwrite(_path: Path) -> bool:
    return False


class ArtifactFileManager:
    """
    Deletes and writes artifact files in the plugin directory.

    The plugin directory must already exist, it is never created here.
    """

    def __init__(self, plugins_dir: Path = DEFAULT_PLUGINS_DIR,
                 confirm_overwrite: ConfirmOverwrite = _never_overwrite):
        """
        :param plugins_dir: Directory holding the artifact files
        :param confirm_overwrite: Asked before an existing file gets overwritten,
                                  returns True to proceed
        """
        self.plugins_dir = Path(plugins_dir)
        self.confirm_overwrite = confirm_overwrite

    def path_of(self, file_name: str) -> Path:
        """
        Path of an artifact file.

        :raises FileSystemError: If the file name would leave the plugin directory
        """
        if file_name in ('', '.', '..') or Path(file_name).name != file_name:
            raise FileSystemError(f"Invalid artifact file name: {file_name!r}")
        return self.plugins_dir / file_name

    def check_plugins_dir(self) -> None:
        """
        :raises FileSystemError: If the plugin directory doesn't exist
        """
        if not self.plugins_dir.is_dir():
            raise FileSystemError(f"Plugin directory not found: {self.plugins_dir}")

    def has_collision(self, file_name: str) -> bool:
        """Check if a file with this name is already in the plugin directory."""
        return self.path_of(file_name).exists()

    def delete_artifact(self, file_name: str) -> None:
        """
        Delete an artifact file.

        :param file_name: Name of the file inside the plugin directory
        :raises FileSystemError: If the directory or the file is missing, or deletion fails
        """
        self.check_plugins_dir()
        path = self.path_of(file_name)
        try:
            path.unlink()
        except FileNotFoundError:
            raise FileSystemError(f"Artifact file not found: {path}")
        except OSError as e:
            raise FileSystemError(f"Failed to delete {path}: {e}")
        logger.info("Deleted artifact %s", path)

    def write_artifact(self, file_name: str, content: bytes, overwrite: bool = False) -> bool:
        """
        Write a downloaded artifact.

        If a file with the same name exists and ``overwrite`` is False, the overwrite
        confirmation is asked first. Nothing is written when it is declined.

        :param file_name: Name of the file inside the plugin directory
        :param content: Artifact bytes
        :param overwrite: The overwrite was already confirmed by the caller
        :return: True if the file was written, False if the overwrite was declined
        :raises FileSystemError: If the directory is missing or writing fails
        """
        self.check_plugins_dir()
        path = self.path_of(file_name)

        if path.exists() and not overwrite:
            if not self.confirm_overwrite(path):
                logger.info("Keeping existing file %s", path)
                return False

        try:
            with open(path, 'wb') as f:
                f.write(content)
        except OSError as e:
            raise FileSystemError(f"Failed to write {path}: {e}")
        logger.info("Wrote artifact %s (%d bytes)", path, len(content))
        return True

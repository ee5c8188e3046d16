"""
File system storage for exported boards.

`FileStorage` writes rendered board images (PNG bytes) under the base directory
named by `components.file_storage.base_path`. `export_filename` gives the name an
export of a given month is saved under.
"""
import os
import uuid
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from contributor_board.core.exceptions import StorageError
from contributor_board.core.logger import get_logger

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

logger = get_logger(__name__)

EXPORT_FILENAME_PREFIX = "top-contributors"


# --- Custom Storage-Specific Exceptions ---

class FilePathError(StorageError):
    """Raised for unusable filenames, such as an empty name or one with directory parts."""
    def __init__(self, message: str):
        super().__init__(message=message)


class FileExistsError(FilePathError):
    """
    Raised when a save would replace an existing file and `overwrite` is False.

    Attributes:
        path (str): The full path to the file that already exists.
    """
    def __init__(self, path: str):
        super().__init__(f"File already exists at path: {path}. Set overwrite=True to replace it.")
        self.path = path


def export_filename(month: str, year: str) -> str:
    """Download name of an exported board, e.g. 'top-contributors-Dec-2025' (extension added on save)."""
    return f"{EXPORT_FILENAME_PREFIX}-{month}-{year}"


class FileStorage:
    """Writes exported board images below one base directory."""
    DEFAULT_STORAGE_PATH = "exports"
    # components/storage/file_storage.py -> contributor_board/
    PACKAGE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

    def __init__(self, config: Optional['ConfigurationManager'] = None):
        """
        Args:
            config (Optional[ConfigurationManager]): Source of `components.file_storage.base_path`.
                A relative path is taken relative to the package directory; without one,
                exports go to `<package>/exports`.

        Raises:
            StorageError: If the base directory cannot be created.
        """
        base_path = (config.get('components.file_storage.base_path') if config else None) or self.DEFAULT_STORAGE_PATH
        self.base_path = base_path if os.path.isabs(base_path) else os.path.join(self.PACKAGE_DIR, base_path)

        try:
            os.makedirs(self.base_path, exist_ok=True)
        except OSError as e:
            logger.error(f"Export directory '{self.base_path}' is unusable: {e}", exc_info=True)
            raise StorageError(message=f"Failed to create or access base directory '{self.base_path}': {e}")
        logger.info(f"FileStorage writing to {self.base_path}")

    def _get_full_path(self, filename: str, extension: str) -> str:
        """Joins filename onto base_path, appending extension unless it is already there."""
        if not filename or not filename.strip():
            raise FilePathError("Filename cannot be empty.")
        filename = filename.strip()
        if os.path.basename(filename) != filename:
            raise FilePathError(f"Filename must not contain directory parts: {filename!r}")

        _, ext = os.path.splitext(filename)
        actual_filename = filename if ext.lower() == extension.lower() else filename + extension
        return os.path.join(self.base_path, actual_filename)

    @staticmethod
    def _generated_name(prefix: Optional[str]) -> str:
        prefix = prefix if prefix and prefix.strip() else "board"
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        return f"{prefix}_{timestamp}_{uuid.uuid4().hex[:6]}"

    def save_bytes(self, data: bytes, filename: Optional[str] = None, extension: str = ".png",
                   filename_prefix: Optional[str] = "board", overwrite: bool = True) -> str:
        """
        Writes raw bytes, typically a rendered PNG, under base_path.

        Exports of the same month share a name, so `overwrite` defaults to True.
        A missing filename is generated from `filename_prefix`.

        Returns:
            str: The full path to the saved file.

        Raises:
            FilePathError: If the filename is empty or has directory parts.
            FileExistsError: If overwrite is False and the file already exists.
            StorageError: For IO/OS errors or non-bytes data.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise StorageError(message=f"save_bytes expects bytes, got {type(data).__name__}.")

        name = filename.strip() if filename and filename.strip() else self._generated_name(filename_prefix)
        full_path = self._get_full_path(name, extension=extension)
        if not overwrite and os.path.exists(full_path):
            logger.warning(f"Refusing to replace existing file {full_path} (overwrite=False).")
            raise FileExistsError(path=full_path)

        try:
            with open(full_path, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Writing '{full_path}' failed: {e}", exc_info=True)
            raise StorageError(message=f"Failed to write file '{full_path}': {e}")
        logger.info(f"Wrote {len(data)} bytes to {full_path}")
        return full_path

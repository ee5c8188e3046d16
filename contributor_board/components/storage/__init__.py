"""
Storage component for the Contributor Board service.

This sub-package saves exported board images to the local file system.
"""
from .file_storage import (
    FileStorage,
    FilePathError,
    FileExistsError,
    export_filename,
)

__all__ = [
    "FileStorage",
    "FilePathError",
    "FileExistsError",
    "export_filename",
]

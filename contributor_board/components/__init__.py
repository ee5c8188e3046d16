"""
Components sub-package for the Contributor Board service.

This package contains the building blocks of the board workflow: markup
extraction, remote image relaying, board rendering and export storage.

`BoardManager` lives in `contributor_board.core.manager` and wires these together.
"""

from .extractor.extractor_manager import ExtractorManager
from .relay.image_relay import ImageRelay
from .renderer.playwright_manager import PlaywrightManager
from .storage.file_storage import (
    FileStorage,
    FilePathError,
    FileExistsError,
    export_filename,
)

__all__ = [
    "ExtractorManager",
    "ImageRelay",
    "PlaywrightManager",
    "FileStorage",
    "FilePathError",
    "FileExistsError",
    "export_filename",
]

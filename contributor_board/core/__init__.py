from .config import get_config, config_manager, ConfigurationManager, ConfigError, ConfigFileNotFoundError, InvalidYamlError
from .exceptions import (
    ContributorBoardError,
    TaskManagementError,
    BoardRenderError,
    ComponentError,
    RendererError,
    ExtractorError,
    MarkupParseError,
    StorageError,
    RelayError,
    RelayUpstreamError,
)
from .logger import setup_logging, get_logger

__all__ = [
    # Config
    "get_config",
    "config_manager",
    "ConfigurationManager",
    "ConfigError",
    "ConfigFileNotFoundError",
    "InvalidYamlError",
    # Logger
    "setup_logging",
    "get_logger",
    # Exceptions
    "ContributorBoardError",
    "TaskManagementError",
    "BoardRenderError",
    "ComponentError",
    "RendererError",
    "ExtractorError",
    "MarkupParseError",
    "StorageError",
    "RelayError",
    "RelayUpstreamError",
]

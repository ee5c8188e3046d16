"""
Custom exception classes for the Contributor Board service.
"""
from typing import Optional


class ContributorBoardError(Exception):
    """
    Base class for all custom exceptions in the Contributor Board service.

    Attributes:
        message (str): A human-readable description of the error.
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


# --- Task Management Related Exceptions ---
class TaskManagementError(ContributorBoardError):
    """
    Raised when a board workflow (parse, render, export) cannot be completed.
    """
    def __init__(self, message: str):
        super().__init__(message)


class BoardRenderError(TaskManagementError):
    """Raised when a contributor board cannot be rasterized into an image."""
    def __init__(self, message: str):
        super().__init__(message)


# --- Component Related Exceptions ---
class ComponentError(ContributorBoardError):
    """
    A general base class for errors originating from within a specific component
    (e.g., Renderer, Extractor, Storage, Relay).

    Attributes:
        component_name (str): Name of the component where the error originated.
    """
    def __init__(self, component_name: str, message: str):
        full_message = f"Error in component '{component_name}': {message}"
        super().__init__(full_message)
        self.component_name = component_name


class RendererError(ComponentError):
    """Raised for errors specific to the Renderer component (browser launch, page rendering, screenshots)."""
    def __init__(self, message: str):
        super().__init__(component_name="Renderer", message=message)


class ExtractorError(ComponentError):
    """Raised for errors specific to the Extractor component (e.g., parsing markup, data extraction logic)."""
    def __init__(self, message: str):
        super().__init__(component_name="Extractor", message=message)


class MarkupParseError(ExtractorError):
    """
    Raised when the pasted markup cannot be turned into an element tree at all.

    This is the only extraction failure that prevents a board from being produced;
    structural mismatches inside parseable markup degrade to placeholder records instead.
    """
    def __init__(self, message: str):
        super().__init__(message=message)


class StorageError(ComponentError):
    """Raised for errors specific to the Storage component (e.g., file system operations)."""
    def __init__(self, message: str):
        super().__init__(component_name="Storage", message=message)


class RelayError(ComponentError):
    """
    Raised when the image relay cannot materialize a remote image, for example
    after exhausting its retry budget on network failures.
    """
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        self.original_exception = original_exception
        full_message = f"{message}"
        if original_exception:
            full_message += f" (Original exception: {str(original_exception)})"
        super().__init__(component_name="Relay", message=full_message)


class RelayUpstreamError(RelayError):
    """
    Raised when the upstream image host answers with a non-success HTTP status.

    Attributes:
        status_code (int): The HTTP status returned by the upstream host.
    """
    def __init__(self, url: str, status_code: int, reason: str = ""):
        self.url = url
        self.status_code = status_code
        detail = f"{status_code} {reason}".strip()
        super().__init__(f"Failed to fetch upstream '{url}': {detail}")

"""Custom exceptions for PageScout."""

from typing import Any, Optional


class PageScoutError(Exception):
    """Base exception for PageScout."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigNotFoundError(PageScoutError):
    """The document was fully parsed and no page configuration was found."""

    pass


class DocumentLoadError(PageScoutError):
    """A document source could not be opened or downloaded."""

    def __init__(
        self,
        message: str,
        source: str,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.source = source


__all__ = ["PageScoutError", "ConfigNotFoundError", "DocumentLoadError"]

"""Custom exceptions for HtmlQuill."""

from typing import Optional


class HtmlQuillError(Exception):
    """Base exception for HtmlQuill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParsingError(HtmlQuillError):
    """Exception raised when the markup cannot be tokenized."""

    pass


class StyleError(HtmlQuillError):
    """Exception raised during style resolution."""

    pass


class NumberingError(HtmlQuillError):
    """Exception raised when the numbering store would become inconsistent."""

    pass


class TableGridError(HtmlQuillError):
    """Exception raised when the table context stack is misused."""

    pass


class MediaError(HtmlQuillError):
    """Exception raised for unsupported or unreadable image payloads."""

    pass


class FetchError(MediaError):
    """Exception raised when a resource cannot be fetched."""

    def __init__(self, message: str, details: Optional[str] = None, uri: Optional[str] = None):
        super().__init__(message, details)
        self.uri = uri


class ConfigurationError(HtmlQuillError):
    """Exception raised for invalid converter configuration."""

    pass

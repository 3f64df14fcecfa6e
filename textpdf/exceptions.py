"""Custom exceptions for TextPDF."""

from typing import Optional


class TextPDFError(Exception):
    """Base exception for TextPDF errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class TemplateError(TextPDFError):
    """Exception raised when the template markup is structurally invalid."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        element: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.element = element


class DataSourceError(TextPDFError):
    """Exception raised when the data source cannot be decoded."""

    pass


class RenderingError(TextPDFError):
    """Exception raised by a document renderer."""

    pass


class UnsupportedFormatError(TextPDFError):
    """Exception raised for an unknown output format."""

    pass

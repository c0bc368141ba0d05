"""Result types for the extraction API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    """Kinds of extraction failure reported to callers."""

    INVALID_URL = "INVALID_URL"
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"


@dataclass(frozen=True)
class ExtractionError:
    """Failure kind plus a human-readable message."""

    type: ErrorType
    message: str


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of extracting one page.

    Failures are returned as values rather than raised, so callers can show
    the message directly.

    Example:
        result = await service.extract(url)
        if result.success:
            print(result.markdown)
        else:
            print(f"{result.error.type.value}: {result.error.message}")
    """

    success: bool
    html: Optional[str] = None
    markdown: Optional[str] = None
    title: Optional[str] = None
    error: Optional[ExtractionError] = None

    @staticmethod
    def ok(html: str, markdown: str, title: Optional[str] = None) -> ExtractionResult:
        """Create a successful result."""
        return ExtractionResult(success=True, html=html, markdown=markdown, title=title or None)

    @staticmethod
    def failure(error_type: ErrorType, message: str) -> ExtractionResult:
        """Create a failed result."""
        return ExtractionResult(success=False, error=ExtractionError(type=error_type, message=message))

    def to_dict(self) -> dict:
        """Convert the result to a dictionary for serialization."""
        data: dict = {"success": self.success}
        if self.html is not None:
            data["html"] = self.html
        if self.markdown is not None:
            data["markdown"] = self.markdown
        if self.title:
            data["title"] = self.title
        if self.error is not None:
            data["error"] = {"type": self.error.type.value, "message": self.error.message}
        return data

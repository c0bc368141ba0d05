"""Protocol definitions for content conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Union

if TYPE_CHECKING:
    from .extractor import ExtractedContent


class ContentExtractor(Protocol):
    """
    Protocol for locating the article content in a full page.

    Implementations return the inner HTML of the content region and the
    article title, or None when the page has no content region.
    """

    def extract(self, page: Union[bytes, str]) -> ExtractedContent | None:
        """
        Extract the content region from a page.

        Args:
            page: Full HTML document

        Returns:
            ExtractedContent, or None if the content region is missing
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations convert an article fragment to Markdown.
    """

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML fragment

        Returns:
            Markdown string
        """
        ...

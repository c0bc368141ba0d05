"""Article content extraction from jw.org pages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Article body on jw.org and wol.jw.org
CONTENT_SELECTOR = "#content.content"

# Article heading inside the page header
TITLE_SELECTOR = "header h1"


@dataclass(frozen=True)
class ExtractedContent:
    """
    Content region of a page.

    Attributes:
        html: Inner HTML of the content region ("" when the region is empty)
        title: Article title ("" when the page has none)
    """

    html: str
    title: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.html.strip()


class JwContentExtractor:
    """
    Locates the article content region and title in a full page.

    Example:
        extractor = JwContentExtractor()
        content = extractor.extract(page_bytes)
        if content is not None:
            print(content.title)
    """

    def __init__(
        self,
        content_selector: str = CONTENT_SELECTOR,
        title_selector: str = TITLE_SELECTOR,
    ):
        """
        Initialize the content extractor.

        Args:
            content_selector: CSS selector for the content region
            title_selector: CSS selector for the article title
        """
        self._content_selector = content_selector
        self._title_selector = title_selector

    def _detect_encoding(self, html: bytes) -> str:
        """Detect character encoding from a meta charset declaration."""
        head = html[:2048].decode("latin-1", errors="ignore")
        charset_match = re.search(r'charset=["\']?([^"\'\s>/;]+)', head, re.IGNORECASE)
        if charset_match:
            return charset_match.group(1).strip()
        return "utf-8"

    def _parse_html(self, page: Union[bytes, str]) -> BeautifulSoup:
        """Parse a page to BeautifulSoup."""
        if isinstance(page, bytes):
            encoding = self._detect_encoding(page)
            try:
                page = page.decode(encoding, errors="replace")
            except LookupError:
                page = page.decode("utf-8", errors="replace")
        return BeautifulSoup(page, "html.parser")

    def extract(self, page: Union[bytes, str]) -> ExtractedContent | None:
        """
        Extract the content region from a page.

        Args:
            page: Full HTML document as bytes or text

        Returns:
            ExtractedContent, or None if the page has no content region
        """
        soup = self._parse_html(page)

        # Every match contributes, in document order
        title = "".join(heading.get_text() for heading in soup.select(self._title_selector)).strip()

        region = soup.select_one(self._content_selector)
        if region is None:
            logger.warning(f"No element matches {self._content_selector!r}")
            return None

        return ExtractedContent(html=region.decode_contents(), title=title)

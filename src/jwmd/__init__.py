"""
jwmd - Convert jw.org and wol.jw.org articles to clean Markdown.

Usage:
    from jwmd import ContentService, HtmlToMarkdown

    # Convert a content fragment you already have
    markdown = HtmlToMarkdown().convert(fragment_html)

    # Fetch and convert an article
    async with ContentService() as service:
        result = await service.extract("https://wol.jw.org/en/wol/d/r1/lp-e/2024245")
        if result.success:
            print(result.markdown)
"""

__version__ = "1.0.0"

from .conversion import HtmlToMarkdown, JwContentExtractor, clean
from .core.service import ContentService, extract_content_blocking, with_title
from .models.config import ExtractionConfig, JwmdConfig, NetworkConfig, OutputConfig
from .models.result import ErrorType, ExtractionError, ExtractionResult

__all__ = [
    "__version__",
    # Core
    "ContentService",
    "extract_content_blocking",
    "with_title",
    # Conversion
    "HtmlToMarkdown",
    "JwContentExtractor",
    "clean",
    # Config
    "JwmdConfig",
    "NetworkConfig",
    "ExtractionConfig",
    "OutputConfig",
    # Results
    "ErrorType",
    "ExtractionError",
    "ExtractionResult",
]

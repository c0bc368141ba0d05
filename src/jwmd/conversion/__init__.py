"""Content conversion for jwmd (content extraction, HTML to Markdown, cleanup)."""

from .extractor import ExtractedContent, JwContentExtractor
from .markdown import HtmlToMarkdown, JwMarkdownConverter, attach_prefixes
from .postprocess import clean
from .protocols import ContentExtractor, MarkdownConverter
from .rules import RULES, Rule

__all__ = [
    # Protocols
    "ContentExtractor",
    "MarkdownConverter",
    # Implementations
    "ExtractedContent",
    "JwContentExtractor",
    "HtmlToMarkdown",
    "JwMarkdownConverter",
    "attach_prefixes",
    "clean",
    # Rules
    "Rule",
    "RULES",
]

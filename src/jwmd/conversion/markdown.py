"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any, Callable, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import ATX, MarkdownConverter

from .nodes import classes, is_block
from .postprocess import clean
from .rules import RULES, Rule, block

logger = logging.getLogger(__name__)

# Paragraph numbers travel through the tree wrapped in these control
# characters until the enclosing block attaches them to its text.
PREFIX_START = "\x02"
PREFIX_END = "\x03"

_PREFIX = re.compile(r"([ \t\n]*)\x02([^\x03]*)\x03([ \t\n]*)")
_STRIP_MARKERS = str.maketrans("", "", PREFIX_START + PREFIX_END)

ConvertFn = Callable[..., str]


def _attach(match: re.Match[str]) -> str:
    before, prefix, after = match.groups()
    newlines = max(before.count("\n"), after.count("\n"))
    if newlines:
        gap = "\n" * min(newlines, 2)
    else:
        gap = " " if before else ""
    return gap + prefix


def attach_prefixes(text: str) -> str:
    """
    Move pending paragraph numbers onto the text that follows them.

    Whitespace after a number is absorbed, so the number sits directly
    before the paragraph's text. Whitespace before it is reduced to at most
    one blank line, or a single space within a line.
    """
    if PREFIX_START not in text:
        return text
    return _PREFIX.sub(_attach, text)


def _flank(node: Tag, content: str, replacement: str) -> str:
    """Keep an inline element's surrounding spaces outside of its markup."""
    source = content if content.strip() else node.get_text()
    if source.strip():
        leading = source[:1].isspace()
        trailing = source[-1:].isspace()
    else:
        leading, trailing = bool(source), False
    if replacement.startswith("\n"):
        leading = False
    if replacement.endswith("\n"):
        trailing = False
    return f"{' ' if leading else ''}{replacement}{' ' if trailing else ''}"


def code_language(pre: Tag) -> str:
    """Language of a code block, taken from a ``language-*`` class on its ``code``."""
    code = pre.find("code")
    for name in sorted(classes(code)) if code is not None else ():
        if name.startswith("language-"):
            return name[len("language-") :]
    return ""


class JwMarkdownConverter(MarkdownConverter):
    """
    markdownify converter with the jw.org site rules layered on top.

    Each element is checked against the rule table before markdownify
    touches it. Removal rules skip the subtree, paragraph-number rules emit
    a pending prefix, and the other rules replace markdownify's rendering
    for the elements they match. Everything else keeps the library's
    conventional rendering.
    """

    def __init__(self, rules: Sequence[Rule] = RULES, **options: Any):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        options.setdefault("strong_em_symbol", "*")
        options.setdefault("escape_asterisks", False)
        options.setdefault("escape_underscores", False)
        options.setdefault("escape_misc", False)
        # Collapse source line breaks without refilling paragraphs
        options.setdefault("wrap", True)
        options.setdefault("wrap_width", None)
        options.setdefault("code_language_callback", code_language)
        super().__init__(**options)
        self.rules = tuple(rules)

    def rule_for(self, node: Tag) -> Optional[Rule]:
        """Return the first rule matching the element, if any."""
        for rule in self.rules:
            if rule.matches(node):
                return rule
        return None

    def process_tag(self, node, parent_tags=None):
        rule = self.rule_for(node)
        if rule is not None:
            if rule.replacement is None:
                logger.debug(f"Dropped <{node.name}> ({rule.name})")
                return ""
            if rule.prefix:
                prefix = rule.replacement("", node)
                return f"{PREFIX_START}{prefix}{PREFIX_END}" if prefix else ""
        return super().process_tag(node, parent_tags=parent_tags)

    def get_conv_fn(self, tag_name):
        default = super().get_conv_fn(tag_name)

        def convert(el, text, parent_tags):
            return self._convert(el, text, parent_tags, default)

        return convert

    def _convert(self, el: Tag, text: str, parent_tags: set, default: Optional[ConvertFn]) -> str:
        if is_block(el):
            text = attach_prefixes(text)
        rule = self.rule_for(el)
        if rule is not None and rule.replacement is not None:
            replacement = rule.replacement(text, el)
            return replacement if is_block(el) else _flank(el, text, replacement)
        if default is not None:
            return default(el, text, parent_tags=parent_tags)
        if is_block(el):
            return block(text, el)
        return text

    def convert_a(self, el, text, parent_tags):
        # Text only, URLs are not kept
        return text


class HtmlToMarkdown:
    """
    Converts jw.org article fragments to clean Markdown.

    The fragment is rendered by :class:`JwMarkdownConverter`, which applies
    the site rules on top of markdownify's conventional rendering. The raw
    result is then cleaned up by :func:`jwmd.conversion.postprocess.clean`.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert('<p class="qu">Why pray?</p>')
    """

    def __init__(
        self,
        rules: Optional[Sequence[Rule]] = None,
        post_process: bool = True,
        **options: Any,
    ):
        """
        Initialize the Markdown converter.

        Args:
            rules: Site rules, evaluated in order (defaults to ``RULES``)
            post_process: Whether ``convert`` runs the cleanup passes
            **options: markdownify options overriding the defaults
        """
        self._converter = JwMarkdownConverter(rules=tuple(rules) if rules is not None else RULES, **options)
        self._post_process = post_process

    def rule_for(self, node: Tag) -> Optional[Rule]:
        """Return the first site rule matching the element, if any."""
        return self._converter.rule_for(node)

    def transform(self, html: str) -> str:
        """
        Run the converter without post-processing.

        Args:
            html: HTML fragment

        Returns:
            Raw Markdown string
        """
        if not html or not html.strip():
            return ""
        markdown = self._converter.convert(html.translate(_STRIP_MARKERS))
        return attach_prefixes(markdown).strip()

    def convert(self, html: str) -> str:
        """
        Convert an HTML fragment to Markdown.

        Args:
            html: Inner HTML of the article content region

        Returns:
            Markdown string ("" for empty input)
        """
        if not html or not html.strip():
            return ""

        try:
            markdown = self.transform(html)
        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            # Return plain text as fallback
            soup = BeautifulSoup(html, "html.parser")
            markdown = soup.get_text(separator="\n").strip()

        if self._post_process:
            markdown = clean(markdown)

        logger.debug(f"Converted {len(html)} bytes of HTML to {len(markdown)} bytes of Markdown")
        return markdown

"""Classification helpers for parsed HTML nodes."""

from __future__ import annotations

import re
from typing import Callable, Iterable

from bs4.element import PageElement, Tag

# Elements rendered as blocks (separated from siblings by blank lines)
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "center",
        "dd",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "li",
        "main",
        "menu",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "output",
        "p",
        "pre",
        "section",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

_DISPLAY_NONE = re.compile(r"display:\s?none", re.IGNORECASE)


def tag_name(node: PageElement) -> str:
    """Lowercase tag name, or "" for non-element nodes."""
    if isinstance(node, Tag):
        return (node.name or "").lower()
    return ""


def classes(node: PageElement) -> set[str]:
    """Return the CSS classes of an element as a set."""
    if not isinstance(node, Tag):
        return set()
    value = node.get("class")
    if value is None:
        return set()
    if isinstance(value, str):
        return set(value.split())
    return set(value)


def has_class(node: PageElement, names: Iterable[str]) -> bool:
    """True if the element carries any of the given classes."""
    return not classes(node).isdisjoint(names)


def is_hidden(node: PageElement) -> bool:
    """
    Check the visibility markers used for non-rendered markup.

    An element is hidden when it has the ``hidden`` class, an inline
    ``display:none`` declaration or ``aria-hidden="true"``.
    """
    if not isinstance(node, Tag):
        return False
    if "hidden" in classes(node):
        return True
    style = node.get("style") or ""
    if isinstance(style, list):
        style = " ".join(style)
    if _DISPLAY_NONE.search(style):
        return True
    return node.get("aria-hidden") == "true"


def is_block(node: PageElement) -> bool:
    return tag_name(node) in BLOCK_TAGS


def has_ancestor(node: PageElement, predicate: Callable[[Tag], bool]) -> bool:
    """Walk parent links and report whether any ancestor satisfies predicate."""
    parent = node.parent
    while parent is not None:
        if predicate(parent):
            return True
        parent = parent.parent
    return False

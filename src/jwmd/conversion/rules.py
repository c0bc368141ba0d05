"""Conversion rules for jw.org / wol.jw.org article markup.

Rules are evaluated in order and the first match wins. Elements no rule
claims keep markdownify's conventional rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from bs4.element import Tag

from .nodes import classes, has_ancestor, has_class, is_hidden, tag_name

# (content, node) -> markdown
Replacement = Callable[[str, Tag], str]
Filter = Union[frozenset, Callable[[Tag], bool]]

REMOVED_TAGS = frozenset({"img", "picture", "figure", "script", "style", "noscript", "iframe", "svg"})
CHROME_TAGS = frozenset({"nav", "header", "footer", "aside"})

QUESTION_CLASSES = frozenset({"questionBox", "qu", "question", "q"})
CITATION_CLASSES = frozenset({"b", "cite", "scripture", "scriptureCitation"})
# Classes that keep a strong tag out of the plain-text rule
STRONG_EXCLUDED_CLASSES = frozenset({"b", "cite", "scripture"})
PARAGRAPH_NUMBER_CLASSES = frozenset({"parNum", "paragraphNumber", "pNum"})
CAPTION_CLASSES = frozenset({"caption", "figcaption"})


@dataclass(frozen=True)
class Rule:
    """
    A conversion rule.

    Attributes:
        name: Rule identifier (used in debug logging)
        filter: Set of tag names, or a predicate over the element
        replacement: Builds Markdown from the converted children and the
            element itself. ``None`` drops the element and its subtree.
        prefix: Output belongs at the start of the next block's text
            instead of standing on its own (paragraph numbers)
    """

    name: str
    filter: Filter
    replacement: Optional[Replacement] = None
    prefix: bool = False

    @property
    def drops(self) -> bool:
        return self.replacement is None

    def matches(self, node: Tag) -> bool:
        if callable(self.filter):
            return bool(self.filter(node))
        return tag_name(node) in self.filter

    @classmethod
    def remove(cls, name: str, filter: Filter) -> Rule:
        """Create a rule that discards matching elements entirely."""
        return cls(name=name, filter=filter)


# Site-specific filters


def _is_answer_field(node: Tag) -> bool:
    # Reader-response text areas ("Your Answer")
    return tag_name(node) == "div" and "gen-field" in classes(node)


def _is_question(node: Tag) -> bool:
    return tag_name(node) in ("div", "p") and has_class(node, QUESTION_CLASSES)


def _is_citation(node: Tag) -> bool:
    return tag_name(node) in ("a", "span") and has_class(node, CITATION_CLASSES)


def _is_paragraph_number(node: Tag) -> bool:
    return tag_name(node) in ("span", "sup") and has_class(node, PARAGRAPH_NUMBER_CLASSES)


def _is_plain_strong(node: Tag) -> bool:
    if tag_name(node) != "strong":
        return False
    if has_class(node, STRONG_EXCLUDED_CLASSES):
        return False
    return not has_ancestor(node, lambda parent: has_class(parent, PARAGRAPH_NUMBER_CLASSES))


def _is_caption(node: Tag) -> bool:
    return tag_name(node) == "figcaption" or has_class(node, CAPTION_CLASSES)


# Site-specific replacements


def _question(content: str, node: Tag) -> str:
    # Questions would otherwise render as bold throughout
    text = content.strip().replace("**", "")
    return f"\n\n{text}\n\n" if text else ""


def _plain(content: str, node: Tag) -> str:
    return content.strip()


def _paragraph_number(content: str, node: Tag) -> str:
    number = (node.get("data-pnum") or "").strip()
    return f"**{number}** " if number else ""


def _emphasis(content: str, node: Tag) -> str:
    text = content.strip()
    return f"*{text}*" if text else ""


def _blockquote(content: str, node: Tag) -> str:
    text = content.strip()
    if not text:
        return ""
    quoted = "\n".join(f"> {line}" for line in text.split("\n"))
    return f"\n\n{quoted}\n\n"


def _caption(content: str, node: Tag) -> str:
    text = content.strip()
    return f"\n\n*{text}*\n\n" if text else ""


RULES: tuple[Rule, ...] = (
    Rule.remove("remove", REMOVED_TAGS),
    Rule.remove("removeChrome", CHROME_TAGS),
    Rule.remove("removeHidden", is_hidden),
    Rule.remove("removeAnswerFields", _is_answer_field),
    Rule("questionBox", _is_question, _question),
    Rule("scriptureCitation", _is_citation, _plain),
    Rule("paragraphNumber", _is_paragraph_number, _paragraph_number, prefix=True),
    Rule("emphasis", frozenset({"em", "i"}), _emphasis),
    Rule("strong", _is_plain_strong, _plain),
    Rule("blockquote", frozenset({"blockquote"}), _blockquote),
    Rule("caption", _is_caption, _caption),
)


def block(content: str, node: Tag) -> str:
    """Render an element markdownify has no conversion for as its own paragraph."""
    text = content.strip()
    return f"\n\n{text}\n\n" if text else ""

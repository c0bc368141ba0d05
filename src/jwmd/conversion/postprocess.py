"""Post-processing of raw converter output.

The passes run in a fixed order. Later passes assume the spacing fixes of
earlier ones, so they are applied one at a time rather than merged.
"""

from __future__ import annotations

import re
from typing import Callable

_IMAGE = re.compile(r"!\[.*?\]\(.*?\)")
_ASTERISK_RUN = re.compile(r"\*{3,}")
_BLANK_BOLD = re.compile(r"\*\*[ \t]+\*\*")
_EMPTY_BOLD = re.compile(r"\*\*\*\*")
_SPACE_BEFORE_PUNCTUATION = re.compile(r"\s+([.,!?;:])")
_MULTIPLE_SPACES = re.compile(r" {2,}")
_ASTERISKS = re.compile(r"\*+")
_QUESTION_BEFORE_NUMBER = re.compile(r"\?(\*\*\d)")
_QUESTION_SPACE_BEFORE_NUMBER = re.compile(r"\?\s+(\*\*\d)")
_QUESTION_BEFORE_WORD = re.compile(r"\?([^\W\d_])")
_LIST_MARKER = re.compile(r"^([-*+])[ \t]+(?=\S)", re.MULTILINE)
_EMPTY_QUOTE_LINE = re.compile(r"^([> ]*>)[ \t]+$", re.MULTILINE)
_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){2,}")


def _marker_positions(line: str, width: int) -> list[tuple[int, int]]:
    """Spans of asterisk runs of exactly ``width`` characters."""
    return [match.span() for match in _ASTERISKS.finditer(line) if len(match.group()) == width]


def _tighten_markers(line: str, markers: list[tuple[int, int]]) -> str:
    """
    Remove padding spaces inside paired emphasis markers on a single line.

    Markers are paired left to right. A space after an opener is kept when a
    digit follows it, and a space before a closer is kept when the closer is
    followed by a digit, so ``**3** text`` paragraph numbers keep their shape.
    A space that separates the marker from another asterisk run is kept.
    An unpaired trailing marker is left untouched.
    """
    if len(markers) < 2:
        return line
    pairs = len(markers) // 2 * 2
    remove: set[int] = set()
    for index, (start, end) in enumerate(markers[:pairs]):
        if index % 2 == 0:
            position = end
            while position < len(line) and line[position] == " ":
                position += 1
            following = line[position] if position < len(line) else ""
            if position > end and following and not following.isdigit() and following != "*":
                remove.update(range(end, position))
        else:
            if end < len(line) and line[end].isdigit():
                continue
            position = start
            while position > 0 and line[position - 1] == " ":
                position -= 1
            if position < start and position > 0 and line[position - 1] == "*":
                continue
            remove.update(range(position, start))
    if not remove:
        return line
    return "".join(char for i, char in enumerate(line) if i not in remove)


def tighten_bold(markdown: str) -> str:
    lines = markdown.split("\n")
    return "\n".join(_tighten_markers(line, _marker_positions(line, 2)) for line in lines)


def tighten_italic(markdown: str) -> str:
    result = []
    for line in markdown.split("\n"):
        markers = _marker_positions(line, 1)
        if markers and markers[0][0] == 0 and line[1:2] in (" ", "\t"):
            # leading "* " is a list marker
            markers = markers[1:]
        result.append(_tighten_markers(line, markers))
    return "\n".join(result)


def _break_before_capital(match: re.Match[str]) -> str:
    letter = match.group(1)
    if letter.isupper():
        return f"?\n\n{letter}"
    return match.group(0)


def break_after_questions(markdown: str) -> str:
    """Start a new paragraph after a question that runs into the next one."""
    markdown = _QUESTION_BEFORE_NUMBER.sub(r"?\n\n\1", markdown)
    markdown = _QUESTION_SPACE_BEFORE_NUMBER.sub(r"?\n\n\1", markdown)
    return _QUESTION_BEFORE_WORD.sub(_break_before_capital, markdown)


def _title_case(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.lower().split(" "))


def normalize_lines(markdown: str) -> str:
    """Title-case all-caps level-2 headings and trim trailing whitespace."""
    lines = []
    for line in markdown.split("\n"):
        line = line.rstrip()
        if line.startswith("## "):
            heading = line[3:]
            if heading.isupper():
                line = f"## {_title_case(heading)}"
        lines.append(line)
    return "\n".join(lines)


PASSES: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("images", lambda text: _IMAGE.sub("", text)),
    ("asterisk_runs", lambda text: _ASTERISK_RUN.sub("", text)),
    ("blank_bold", lambda text: _BLANK_BOLD.sub(" ", text)),
    ("empty_bold", lambda text: _EMPTY_BOLD.sub("", text)),
    ("space_before_punctuation", lambda text: _SPACE_BEFORE_PUNCTUATION.sub(r"\1", text)),
    ("multiple_spaces", lambda text: _MULTIPLE_SPACES.sub(" ", text)),
    ("bold_spacing", tighten_bold),
    ("italic_spacing", tighten_italic),
    ("question_breaks", break_after_questions),
    ("list_markers", lambda text: _LIST_MARKER.sub(r"\1 ", text)),
    ("empty_quote_lines", lambda text: _EMPTY_QUOTE_LINE.sub(r"\1", text)),
    ("blank_lines", lambda text: _BLANK_LINES.sub("\n\n", text)),
    ("lines", normalize_lines),
    ("strip", str.strip),
)


def clean(markdown: str) -> str:
    """
    Clean up raw Markdown produced by the rule engine.

    Fixes whitespace and punctuation spacing, emphasis marker padding,
    paragraph breaks after questions and all-caps headings.

    Args:
        markdown: Raw converter output

    Returns:
        Cleaned Markdown string
    """
    for _name, apply in PASSES:
        markdown = apply(markdown)
    return markdown

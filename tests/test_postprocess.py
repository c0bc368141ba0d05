"""Tests for the Markdown cleanup passes."""

import pytest
from jwmd.conversion.postprocess import PASSES, clean, normalize_lines, tighten_bold, tighten_italic


class TestPassOrder:
    """Tests for the pass pipeline."""

    def test_pass_names_in_order(self):
        """Test the passes run in their documented order."""
        assert [name for name, _ in PASSES] == [
            "images",
            "asterisk_runs",
            "blank_bold",
            "empty_bold",
            "space_before_punctuation",
            "multiple_spaces",
            "bold_spacing",
            "italic_spacing",
            "question_breaks",
            "list_markers",
            "empty_quote_lines",
            "blank_lines",
            "lines",
            "strip",
        ]

    def test_spacing_fixed_before_question_breaks(self):
        """Test a space before "?" is removed before the break is inserted."""
        assert clean("Really ?Yes it is.") == "Really?\n\nYes it is."

    def test_empty_input(self):
        """Test empty input stays empty."""
        assert clean("") == ""
        assert clean("  \n\n  ") == ""


class TestCharacterPasses:
    """Tests for image, asterisk and spacing passes."""

    def test_images_stripped(self):
        """Test residual image syntax is removed."""
        assert clean("Before ![alt text](photo.jpg) after") == "Before after"

    def test_asterisk_runs_removed(self):
        """Test runs of three or more asterisks are dropped."""
        assert clean("***Bold italic***") == "Bold italic"
        assert clean("Empty **** here") == "Empty here"

    def test_blank_bold_collapsed(self):
        """Test a bold pair holding only spaces becomes one space."""
        assert clean("Word** **word") == "Word word"

    def test_blank_bold_not_across_lines(self):
        """Test markers on different lines are not merged."""
        assert clean("A**\n**B") == "A**\n**B"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Hello , world !", "Hello, world!"),
            ("Wait ; then :", "Wait; then:"),
            ("End .", "End."),
            ("Why ?", "Why?"),
        ],
    )
    def test_space_before_punctuation(self, raw, expected):
        """Test whitespace before punctuation is removed."""
        assert clean(raw) == expected

    def test_multiple_spaces_collapsed(self):
        """Test runs of spaces become one."""
        assert clean("one   two    three") == "one two three"


class TestEmphasisSpacing:
    """Tests for bold and italic marker tightening."""

    def test_bold_padding_removed(self):
        """Test spaces inside a bold pair are removed."""
        assert tighten_bold("** bold text **") == "**bold text**"

    def test_paragraph_number_kept(self):
        """Test "**3** text" keeps its space."""
        assert clean("**3** What must we do?") == "**3** What must we do?"

    def test_space_before_number_kept(self):
        """Test an opener followed by a digit keeps its space."""
        assert tighten_bold("** 3**") == "** 3**"

    def test_several_bold_pairs(self):
        """Test each pair on a line is tightened independently."""
        assert tighten_bold("A ** b ** and ** c ** d") == "A **b** and **c** d"

    def test_unpaired_bold_untouched(self):
        """Test a lone bold marker is left alone."""
        assert tighten_bold("** lonely") == "** lonely"

    def test_italic_padding_removed(self):
        """Test spaces inside an italic pair are removed."""
        assert tighten_italic("An * emphasized * word") == "An *emphasized* word"

    def test_italic_ignores_list_marker(self):
        """Test a leading "* " list marker is not paired."""
        assert tighten_italic("* An * aside *") == "* An *aside*"

    def test_italic_not_across_lines(self):
        """Test italic markers on different lines are not paired."""
        assert tighten_italic("*open\nclose *") == "*open\nclose *"

    def test_italic_ignores_bold_markers(self):
        """Test double asterisks are not treated as italic markers."""
        assert tighten_italic("**bold** and *it*") == "**bold** and *it*"

    def test_italic_keeps_space_beside_bold(self):
        """Test a space between an italic marker and a bold marker is kept."""
        assert tighten_italic("A* **bold** text*") == "A* **bold** text*"


class TestQuestionBreaks:
    """Tests for paragraph breaks after questions."""

    def test_question_run_on(self):
        """Test a question running into a new sentence is split."""
        assert clean("Is this true?Yes it is") == "Is this true?\n\nYes it is"

    def test_question_before_paragraph_number(self):
        """Test a paragraph number after a question starts a new paragraph."""
        assert clean("What?**3** Next") == "What?\n\n**3** Next"

    def test_question_space_before_paragraph_number(self):
        """Test the break also applies when a space separates them."""
        assert clean("What? **3** Next") == "What?\n\n**3** Next"

    def test_lowercase_not_split(self):
        """Test a lowercase continuation is left alone."""
        assert clean("what?no") == "what?no"

    def test_non_ascii_uppercase(self):
        """Test accented capitals also start a new paragraph."""
        assert clean("Pourquoi?Écoutez") == "Pourquoi?\n\nÉcoutez"


class TestLinePasses:
    """Tests for list, quote, blank line and heading passes."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("-\titem", "- item"),
            ("+\t\titem", "+ item"),
            ("*\titem", "* item"),
            ("---", "---"),
        ],
    )
    def test_list_marker_spacing(self, raw, expected):
        """Test list markers get exactly one space."""
        assert clean(raw) == expected

    def test_empty_quote_lines(self):
        """Test an empty quote line loses its trailing space."""
        assert clean("> quote\n>   \n> more") == "> quote\n>\n> more"

    def test_nested_empty_quote_line(self):
        """Test nested quote markers are kept."""
        assert clean("> > a\n> > \n> > b") == "> > a\n> >\n> > b"

    def test_blank_lines_capped(self):
        """Test blank line runs collapse to one blank line."""
        assert clean("A\n\n\n\nB") == "A\n\nB"

    def test_whitespace_lines_count_as_blank(self):
        """Test lines holding only spaces or tabs are blank lines."""
        assert clean("A\n  \n\t\n\nB") == "A\n\nB"

    def test_heading_title_cased(self):
        """Test an all-caps level-2 heading is title-cased."""
        assert clean("## WHAT DOES THE BIBLE SAY") == "## What Does The Bible Say"

    def test_heading_with_digits(self):
        """Test digits do not stop title casing."""
        assert normalize_lines("## 2024 REPORT") == "## 2024 Report"

    @pytest.mark.parametrize(
        "heading",
        ["## What does it MEAN", "# ALL CAPS TITLE", "### SMALL HEADING"],
    )
    def test_other_headings_unchanged(self, heading):
        """Test mixed-case and other-level headings are kept."""
        assert clean(heading) == heading

    def test_trailing_whitespace_trimmed(self):
        """Test trailing whitespace is removed from every line."""
        assert clean("Line   \nNext\t\nLast") == "Line\nNext\nLast"

    def test_result_stripped(self):
        """Test leading and trailing whitespace is removed."""
        assert clean("\n\n  Text  \n\n") == "Text"


class TestIdempotence:
    """Tests for stability of cleaned output."""

    @pytest.mark.parametrize(
        "raw",
        [
            "Is this true?Yes it is",
            "What? **3** Next",
            "## WHAT DOES THE BIBLE SAY\n\n**1** Text here.",
            "** bold ** and * it *",
            "> quote\n>   \n\n\n\nmore",
            "- one\n- two\n\n1. first",
            "Hello , world !  Again ![img](a.png)",
            "A* **bold** text*",
            "Footnote* **Note** see *this*.",
        ],
    )
    def test_clean_twice(self, raw):
        """Test cleaning cleaned output changes nothing."""
        once = clean(raw)

        assert clean(once) == once

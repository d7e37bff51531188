"""
Basic parser tests - simplest cases

Tests empty source, plain text, plain and line directives, and markers.
"""

import pytest

from inliner.lib.parser import Parser, text_parse
from inliner.lib.errors import ParseError
from inliner.models.tokens import DirectiveKind, DirectiveToken, TextToken


class TestEmptyAndSimple:
    """Test empty source and text without directives"""

    def test_empty_source(self):
        """Empty string should parse to empty list"""
        assert Parser("").parse() == []

    def test_plain_text(self):
        """Text without directives is a single text token"""
        source = "Line 1\nLine 2 with $ and (parens).\n"
        assert Parser(source).parse() == [TextToken(source)]

    def test_bare_marker_is_text(self):
        """Marker not followed by . or ( is ordinary text"""
        source = "the $inline marker"
        assert Parser(source).parse() == [TextToken(source)]

    def test_text_parse_helper(self):
        """Module helper parses with a fresh parser"""
        assert text_parse("abc") == [TextToken("abc")]


class TestPlainDirective:
    """Test $inline(...) directives"""

    def test_single_directive(self):
        """Directive alone replaces its own extent"""
        source = "$inline('path/to/file')"
        tokens = Parser(source).parse()

        assert tokens == [DirectiveToken(DirectiveKind.PLAIN, ["path/to/file"], 0, len(source))]

    def test_directive_with_text(self):
        """Text on both sides is preserved"""
        tokens = Parser("a $inline('b') c").parse()

        assert tokens == [
            TextToken("a "),
            DirectiveToken(DirectiveKind.PLAIN, ["b"], 2, 14),
            TextToken(" c"),
        ]

    def test_adjacent_directives(self):
        """Back-to-back directives produce no empty text between them"""
        tokens = Parser("$inline('a')$inline('b')").parse()

        assert [type(t) for t in tokens] == [DirectiveToken, DirectiveToken]
        assert tokens[0].end == tokens[1].start == 12

    def test_directive_without_params(self):
        """Empty parentheses give an empty parameter list"""
        tokens = Parser("$inline()").parse()
        assert tokens == [DirectiveToken(DirectiveKind.PLAIN, [], 0, 9)]

    def test_custom_marker(self):
        """Marker text is configurable"""
        tokens = Parser("x @@include('a') $inline('b')", marker="@@include").parse()

        assert tokens[1] == DirectiveToken(DirectiveKind.PLAIN, ["a"], 2, 16)
        assert tokens[2] == TextToken(" $inline('b')")

    def test_tokens_cover_source(self):
        """Text tokens plus directive spans rebuild the source"""
        source = "x$inline('a')y\n$inline('b')z"
        rebuilt = ""
        for token in Parser(source).parse():
            if isinstance(token, TextToken):
                rebuilt += token.value
            else:
                rebuilt += source[token.start:token.end]
        assert rebuilt == source


class TestLineDirective:
    """Test $inline.line(...) directives"""

    def test_line(self):
        """Span is the whole line, newlines excluded"""
        tokens = Parser("test\ntest$inline.line('path/to/file')test\ntest").parse()

        assert tokens[0] == TextToken("test\n")
        assert tokens[1].kind == DirectiveKind.LINE
        assert tokens[1].params == ["path/to/file"]
        assert tokens[2] == TextToken("\ntest")

    def test_line_in_comment(self):
        """Comment syntax and indentation are replaced along with the call"""
        source = "a\n    // $inline.line('b')\nc"
        tokens = Parser(source).parse()

        assert source[tokens[1].start:tokens[1].end] == "    // $inline.line('b')"

    def test_line_at_end_of_source(self):
        """Last line without newline ends at end of source"""
        source = "a\n# $inline.line('b')"
        tokens = Parser(source).parse()

        assert tokens[1].end == len(source)
        assert len(tokens) == 2

    def test_line_overlapping_directive(self):
        """A line directive cannot swallow an earlier directive on its line"""
        with pytest.raises(ParseError, match="overlaps"):
            Parser("$inline('a') $inline.line('b')").parse()


class TestInvalidMethods:
    """Test unknown and misplaced method suffixes"""

    def test_unknown_method(self):
        """Unknown suffix is fatal"""
        with pytest.raises(ParseError, match="is not a valid") as info:
            Parser("abc $inline.bogus('a')").parse()
        assert info.value.position == 4

    def test_stray_end(self):
        """Closer without an opener is fatal"""
        with pytest.raises(ParseError, match=r"\$inline.end is not a valid"):
            Parser("$inline.end").parse()

    def test_missing_method_name(self):
        """Dot must be followed by a method name"""
        with pytest.raises(ParseError, match="method name") as info:
            Parser("$inline.('a')").parse()
        assert info.value.position == 8

"""
Block parser tests - paired directives and span resolution

Tests start/end blocks, open/close regions, skip regions and shortcut
declarations, and that only the awaited closer is honored while a pair
is open.
"""

import pytest

from inliner.lib.parser import Parser
from inliner.lib.errors import ParseError
from inliner.models.tokens import DirectiveKind, DirectiveToken, TextToken


def directives_of(tokens):
    return [t for t in tokens if isinstance(t, DirectiveToken)]


class TestStartEnd:
    """Test $inline.start ... $inline.end blocks"""

    def test_start_and_end(self):
        """Span covers the lines between the markers"""
        source = "$inline.start('./a.txt')\ntest\n$inline.end"
        left, result, right = Parser(source).parse()

        assert left == TextToken("$inline.start('./a.txt')\n")
        assert result.kind == DirectiveKind.BLOCK
        assert result.params == ["./a.txt"]
        assert source[result.start:result.end] == "test"
        assert right == TextToken("\n$inline.end")

    def test_multiline_body(self):
        """Several body lines are replaced together"""
        source = "<!-- $inline.start('a') -->\none\ntwo\n<!-- $inline.end -->\n"
        tokens = Parser(source).parse()

        block = directives_of(tokens)[0]
        assert source[block.start:block.end] == "one\ntwo"

    def test_empty_body_line(self):
        """A single empty body line is allowed"""
        source = "$inline.start('a')\n\n$inline.end"
        block = directives_of(Parser(source).parse())[0]

        assert block.start == block.end

    def test_no_body_line(self):
        """Adjacent start and end lines are fatal"""
        with pytest.raises(ParseError, match="at least one line"):
            Parser("$inline.start('a')\n$inline.end").parse()

    def test_missing_end(self):
        """Unclosed block reports the span start"""
        with pytest.raises(ParseError, match=r"Missing \$inline.end") as info:
            Parser("$inline.start('a')\nbody\n").parse()
        assert info.value.position == 19

    def test_directives_ignored_inside(self):
        """Other directives, even malformed ones, are body text"""
        source = "$inline.start('a')\n$inline('b')\n$inline.bogus(\n$inline.end"
        tokens = Parser(source).parse()

        blocks = directives_of(tokens)
        assert len(blocks) == 1
        assert source[blocks[0].start:blocks[0].end] == "$inline('b')\n$inline.bogus("


class TestOpenClose:
    """Test $inline.open ... $inline.close regions"""

    def test_open_close_with_skip_chars(self):
        """Skip lengths trim comment syntax from the span"""
        source = "<!--$inline.open('a', 3)-->old<!--$inline.close(4)-->"
        tokens = Parser(source).parse()

        assert tokens == [
            TextToken("<!--$inline.open('a', 3)-->"),
            DirectiveToken(DirectiveKind.REGION, ["a", 3], 27, 30),
            TextToken("<!--$inline.close(4)-->"),
        ]

    def test_open_close_inline(self):
        """Without skip lengths the span is exactly between the calls"""
        source = "/* $inline.open('a') */ x /* $inline.close() */"
        region = directives_of(Parser(source).parse())[0]

        assert source[region.start:region.end] == " */ x /* "

    def test_missing_close(self):
        """Unclosed region is fatal"""
        with pytest.raises(ParseError, match=r"Missing \$inline.close"):
            Parser("$inline.open('a') text").parse()

    def test_non_numeric_skip(self):
        """Skip length must be numeric"""
        with pytest.raises(ParseError, match="Skip length"):
            Parser("$inline.open('a', 'x') $inline.close()").parse()


class TestSkip:
    """Test $inline.skipStart ... $inline.skipEnd regions"""

    def test_skip_region(self):
        """Directives inside a skip region stay text"""
        source = "$inline.skipStart\n$inline('a')\n$inline.skipEnd\n$inline('b')"
        tokens = Parser(source).parse()

        assert len(tokens) == 2
        assert tokens[0] == TextToken(source[:source.index("$inline('b')")])
        assert tokens[1].params == ["b"]

    def test_tagged_skip(self):
        """A differently tagged skipEnd does not close the skip"""
        source = "$inline.skipStart('x')\n$inline.skipEnd('y')\n$inline('a')\n$inline.skipEnd('x')"
        assert Parser(source).parse() == [TextToken(source)]

    def test_bare_skip_end_closes_tagged(self):
        """An untagged skipEnd closes any skip"""
        source = "$inline.skipStart('x')\n$inline.skipEnd\n$inline('a')"
        tokens = Parser(source).parse()

        assert directives_of(tokens)[0].params == ["a"]

    def test_missing_skip_end(self):
        """Unclosed skip is fatal"""
        with pytest.raises(ParseError, match=r"Missing \$inline.skipEnd") as info:
            Parser("a $inline.skipStart\n$inline('a')").parse()
        assert info.value.position == 2


class TestShortcutDeclaration:
    """Test $inline.shortcut annotation tokens"""

    def test_shortcut(self):
        """Declaration is emitted ahead of the text that still contains it"""
        content = "$inline.shortcut('test', 'file|t1:$2,$1')"
        result, text = Parser(content).parse()

        assert result.kind == DirectiveKind.SHORTCUT
        assert result.params == ["test", "file|t1:$2,$1"]
        assert (result.start, result.end) == (0, len(content))
        assert text == TextToken(content)

    def test_shortcut_before_directive(self):
        """Declaration token precedes the directive that follows it"""
        content = "$inline.shortcut('foo', 'b')\n$inline('foo')"
        tokens = Parser(content).parse()

        assert [t.kind if isinstance(t, DirectiveToken) else "text" for t in tokens] == [
            DirectiveKind.SHORTCUT,
            "text",
            DirectiveKind.PLAIN,
        ]
        assert tokens[1] == TextToken("$inline.shortcut('foo', 'b')\n")

    def test_shortcut_requires_expansion(self):
        """Name alone is not a declaration"""
        with pytest.raises(ParseError, match="requires a name and an expansion"):
            Parser("$inline.shortcut('foo')").parse()

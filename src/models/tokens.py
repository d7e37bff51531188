"""
Lexer token models

Type-safe structures returned by Parser.parse() for one source document.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Union


class DirectiveKind(Enum):
    """
    Syntactic forms of a directive

    Every kind except SHORTCUT replaces a span of the source with resolved
    content; they differ only in how the span is computed.
    """
    PLAIN = "plain"          # $inline('a')
    LINE = "line"            # $inline.line('a')
    BLOCK = "block"          # $inline.start('a') ... $inline.end
    REGION = "region"        # $inline.open('a') ... $inline.close
    SHORTCUT = "shortcut"    # $inline.shortcut('name', 'expansion')


# Method suffix -> kind, for the methods that open a token directly
METHOD_KINDS = {
    "": DirectiveKind.PLAIN,
    "line": DirectiveKind.LINE,
    "start": DirectiveKind.BLOCK,
    "open": DirectiveKind.REGION,
    "shortcut": DirectiveKind.SHORTCUT,
}


Param = Union[str, int, float]


@dataclass
class TextToken:
    """
    Verbatim run of source text

    Attributes:
        value: The text, copied unchanged from the source
    """
    value: str


@dataclass
class DirectiveToken:
    """
    A directive found in source text

    Attributes:
        kind: Syntactic form of the directive
        params: Literal parameters in call order (strings and numbers)
        start: Offset of the first character of the replaced span
        end: Offset one past the last character of the replaced span

    For SHORTCUT tokens start/end delimit the declaration's own literal
    text, which stays in the surrounding text tokens.

    Example:
        For source "x $inline('a') y":
        DirectiveToken(kind=DirectiveKind.PLAIN, params=['a'], start=2, end=14)
    """
    kind: DirectiveKind
    params: List[Param] = field(default_factory=list)
    start: int = 0
    end: int = 0


Token = Union[TextToken, DirectiveToken]


@dataclass
class DirectiveMatch:
    """
    Result of parsing a single directive at a known position

    Returned by Parser.directive_parse(). Unlike DirectiveToken it carries
    the raw method name, since closers (end, close, skipEnd) have no kind.

    Attributes:
        method: Method suffix without the dot ("" for the plain form)
        params: Literal parameters in call order
        position: Offset of the marker
        end: Offset just past the directive's literal text
    """
    method: str
    params: List[Param]
    position: int
    end: int

"""
Parser for $inline directive syntax

Turns source text into an ordered list of text and directive tokens.

The parser operates in two layers:
1. Scanning: locate marker occurrences and parse each directive's method
   suffix and literal parameter list (via ParamLexer)
2. Span resolution: a small state machine that pairs openers with closers
   and computes the exact span each directive replaces

Key features:
- Five span policies (plain, line, start/end block, open/close region,
  skipStart/skipEnd verbatim region)
- Shortcut declarations emitted as annotation tokens
- Everything but the awaited closer is ignored inside open regions
- Error reporting with source offsets

Example:
    >>> tokens = Parser("a $inline('b') c").parse()
    >>> [type(t).__name__ for t in tokens]
    ['TextToken', 'DirectiveToken', 'TextToken']
    >>> tokens[1].params
    ['b']
"""

import json
import re
from typing import List, Optional, Tuple, Union

from pygments.token import Comment, Number, Punctuation, String, Whitespace

from ..config import appsettings
from ..models.tokens import (
    METHOD_KINDS,
    DirectiveKind,
    DirectiveMatch,
    DirectiveToken,
    Param,
    TextToken,
    Token,
)
from .errors import ParseError
from .lexer import UnclosedString, get_lexer
from .log import LOG

METHOD_NAME = re.compile(r'[A-Za-z_$][\w$]*')
STRING_ESCAPE = re.compile(r'\\(.)|"', re.DOTALL)
INTEGER = re.compile(r'-?\d+')


class Parser:
    """
    Directive lexer for one source document

    Handles:
    - Marker detection with optional .method suffix and (params)
    - JSON-like string and number literals in any quote style
    - Replacement span computation per directive kind
    - Unmatched opener detection
    """

    def __init__(self, source: str, marker: Optional[str] = None) -> None:
        """
        Initialize parser with source text

        Args:
            source: Text to scan for directives
            marker: Marker text, defaults to appsettings.marker

        Attributes:
            source: Source text being parsed
            marker: Marker that introduces a directive
            pattern: Compiled scan pattern for the marker
            tokens: Accumulated output tokens
            position: Offset of the first source character not yet emitted
        """
        self.source = source
        self.marker = appsettings.marker if marker is None else marker
        self.pattern = appsettings.directivePattern_make(self.marker)
        self.lexer = get_lexer()
        self.tokens: List[Token] = []
        self.position = 0

    def parse(self) -> List[Token]:
        """
        Parse source text into tokens

        Returns:
            Tokens covering the source in order. Text without any directive
            yields a single TextToken; empty source yields [].

        Raises:
            ParseError: Malformed directive, unknown method, or an opener
                        without its closer
        """
        self.tokens = []
        self.position = 0

        skip: Union[None, bool, Param] = None
        skip_position = 0
        pending: Optional[DirectiveToken] = None
        pending_position = 0
        search = 0

        while True:
            match = self.pattern.search(self.source, search)
            if not match:
                break
            pos = match.start()

            try:
                directive = self.directive_parse(pos)
            except ParseError:
                # Inside an open region only the closer matters
                if skip is not None or pending is not None:
                    search = match.end()
                    continue
                raise
            search = directive.end
            method = directive.method
            params = directive.params

            if skip is not None:
                if method == "skipEnd" and self.skip_closes(skip, params):
                    LOG(f"Skip region closed at {pos}", level=3)
                    skip = None
                continue

            if pending is not None:
                if pending.kind == DirectiveKind.BLOCK:
                    if method != "end":
                        continue
                    pending.end = self.lineRange_get(pos)[0] - 1
                    if pending.start > pending.end:
                        raise ParseError(
                            f"There must be at least one line between {self.marker}.start and {self.marker}.end",
                            pending.start,
                        )
                else:
                    if method != "close":
                        continue
                    pending.end = pos - self.offset_get(params, 0, pos)
                    if pending.end < pending.start:
                        raise ParseError(f"{self.marker}.close overlaps {self.marker}.open", pos)
                self.token_add(pending, pending_position)
                pending = None
                continue

            if method == "skipStart":
                skip = params[0] if params else True
                skip_position = pos
                continue

            kind = METHOD_KINDS.get(method)
            if kind is None:
                raise ParseError(f"{self.marker}.{method} is not a valid {self.marker} statement", pos)

            if kind == DirectiveKind.PLAIN:
                self.token_add(DirectiveToken(kind, params, pos, directive.end), pos)
            elif kind == DirectiveKind.LINE:
                start, end = self.lineRange_get(pos)
                self.token_add(DirectiveToken(kind, params, start, end), pos)
            elif kind == DirectiveKind.BLOCK:
                pending = DirectiveToken(kind, params, start=self.lineRange_get(pos)[1] + 1)
                pending_position = pos
            elif kind == DirectiveKind.REGION:
                pending = DirectiveToken(kind, params, start=directive.end + self.offset_get(params, 1, pos))
                pending_position = pos
            elif kind == DirectiveKind.SHORTCUT:
                if len(params) < 2:
                    raise ParseError(f"{self.marker}.shortcut requires a name and an expansion", pos)
                # Annotation only: the declaration text stays in the output
                self.tokens.append(DirectiveToken(kind, params, pos, directive.end))
            else:
                raise ParseError(f"Unhandled directive kind {kind}", pos)

        if self.position != len(self.source):
            self.tokens.append(TextToken(self.source[self.position:]))

        if pending is not None:
            closer = "end" if pending.kind == DirectiveKind.BLOCK else "close"
            raise ParseError(f"Missing {self.marker}.{closer}", pending.start)
        if skip is not None:
            raise ParseError(f"Missing {self.marker}.skipEnd", skip_position)

        LOG(f"Parsed {len(self.tokens)} tokens", level=3)
        return self.tokens

    def token_add(self, token: DirectiveToken, position: int) -> None:
        """
        Emit a span-replacing directive, preceded by the text before it

        Args:
            token: Directive with its span resolved
            position: Offset of the directive's marker (for errors)
        """
        if token.start < self.position:
            raise ParseError("Directive span overlaps a previous directive", position)
        if token.start != self.position:
            self.tokens.append(TextToken(self.source[self.position:token.start]))
        self.tokens.append(token)
        self.position = token.end

    def directive_parse(self, pos: int) -> DirectiveMatch:
        """
        Parse one directive starting at the marker position

        Args:
            pos: Offset of the marker in source

        Returns:
            DirectiveMatch with method name, params and end offset

        Example:
            >>> Parser("$inline.shortcut('a', 'b')").directive_parse(0)
            DirectiveMatch(method='shortcut', params=['a', 'b'], position=0, end=26)
        """
        cursor = pos + len(self.marker)
        method = ""

        if self.source.startswith(".", cursor):
            name = METHOD_NAME.match(self.source, cursor + 1)
            if not name:
                raise ParseError(f"Expecting {self.marker} method name", cursor + 1)
            method = name.group(0)
            cursor = name.end()

        params: List[Param] = []
        if self.source.startswith("(", cursor):
            params, cursor = self.params_parse(cursor + 1)

        return DirectiveMatch(method=method, params=params, position=pos, end=cursor)

    def params_parse(self, pos: int) -> Tuple[List[Param], int]:
        """
        Parse a literal parameter list up to and including ")"

        Args:
            pos: Offset just after the opening parenthesis

        Returns:
            Tuple of (params, offset just past the closing parenthesis)
        """
        end = pos
        while True:
            close = self.source.find(")", end)
            end = len(self.source) if close < 0 else close + 1
            result = self.params_scan(pos, end)
            if result is not None:
                return result

    def params_scan(self, pos: int, end: int) -> Optional[Tuple[List[Param], int]]:
        """
        Lex source[pos:end], a window that stops at a ")" or at end of input

        Returns None when the window cut a string or comment short and a
        wider window is needed.
        """
        params: List[Param] = []
        need_value = True
        final = end == len(self.source)

        for index, ttype, value in self.lexer.get_tokens_unprocessed(self.source[pos:end]):
            offset = pos + index
            if ttype in Punctuation and value == ")":
                return params, offset + 1
            if not final and offset + len(value) == end:
                return None
            if ttype in Whitespace or ttype in Comment:
                continue
            if ttype in Punctuation:
                if need_value:
                    raise ParseError("Missing value", offset)
                need_value = True
                continue
            if not need_value:
                raise ParseError("Missing ',' between values", offset)
            need_value = False
            params.append(self.literal_parse(ttype, value, offset))

        if not final:
            return None
        raise ParseError("Missing right parenthesis", len(self.source))

    def literal_parse(self, ttype, value: str, offset: int) -> Param:
        """Convert a lexed literal into a Python value"""
        if ttype in UnclosedString:
            raise ParseError("Unclosed string", offset)
        if ttype in String:
            return self.string_parse(value, offset)
        if ttype in Number:
            return self.number_parse(value)
        raise ParseError("Value must be number or string", offset)

    @staticmethod
    def string_parse(text: str, offset: int = 0) -> str:
        """
        Decode a quoted literal of any quote style

        Single-quoted and backtick strings are rewritten as a JSON string
        and decoded with the JSON rules, so escapes behave the same in all
        three forms.

        Example:
            >>> Parser.string_parse("`a\\\\tb`")
            'a\\tb'
        """

        def escape_normalize(match: re.Match[str]) -> str:
            char = match.group(1)
            if char is None:
                return '\\"'
            if char in "'`":
                return char
            if char == "\n":
                return ""
            return "\\" + char

        body = STRING_ESCAPE.sub(escape_normalize, text[1:-1])
        try:
            return json.loads(f'"{body}"', strict=False)
        except ValueError:
            raise ParseError("Invalid string literal", offset) from None

    @staticmethod
    def number_parse(text: str) -> Union[int, float]:
        """
        Decode a numeric literal (decimal, float, exponent or hex)

        Integral values come back as int, so `1e2` and `2.0` render as
        "100" and "2" when used as text.
        """
        if "x" in text or "X" in text:
            return int(text, 16)
        if INTEGER.fullmatch(text):
            return int(text)
        value = float(text)
        if value.is_integer():
            return int(value)
        return value

    def offset_get(self, params: List[Param], index: int, position: int) -> int:
        """
        Read an optional skip-length parameter

        Returns:
            The parameter as int, 0 when absent
        """
        if len(params) <= index:
            return 0
        value = params[index]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ParseError("Skip length must be a number", position)
        return int(value)

    @staticmethod
    def skip_closes(skip: Union[bool, Param], params: List[Param]) -> bool:
        """
        Whether a skipEnd with these params closes the current skip

        An untagged skipStart closes on any skipEnd, a bare skipEnd closes
        any skip, otherwise the tags must be equal.
        """
        return skip is True or not params or params[0] == skip

    def lineRange_get(self, pos: int) -> Tuple[int, int]:
        """
        Find the line containing an offset

        Returns:
            Tuple of (offset of line start, offset of the newline ending the
            line or len(source) on the last line)
        """
        start = self.source.rfind("\n", 0, pos) + 1
        end = self.source.find("\n", pos)
        if end < 0:
            end = len(self.source)
        return start, end


def text_parse(source: str, marker: Optional[str] = None) -> List[Token]:
    """Parse source text into tokens with a fresh Parser"""
    return Parser(source, marker).parse()

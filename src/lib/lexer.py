"""
Pygments lexer for directive parameter lists

Tokenizes the text following the opening parenthesis of a directive, e.g.
the `'a.txt', 2)` part of `$inline.open('a.txt', 2)`. The Parser walks
these tokens until the closing parenthesis.

Token types:
- String.Double / String.Single / String.Backtick: closed string literals
- String.Unclosed: a string literal cut off by end of line or input
- Number: decimal, float, exponent and hex literals
- Name: bare identifiers (always rejected as values)
- Punctuation: "," separators and the closing ")"
- Comment, Whitespace: skipped; an unterminated /* comment runs to the end
- Error: anything else
"""

import re

from pygments.lexer import RegexLexer
from pygments.token import (
    Comment,
    Error,
    Name,
    Number,
    Punctuation,
    String,
    Whitespace,
)

# Dynamic pygments token subtype for unterminated strings
UnclosedString = String.Unclosed


class ParamLexer(RegexLexer):
    """
    Lexer for JSON-like literal argument lists

    Example:
        'a', "b" /* note */, 0x1F)

    Tokens:
        'a' → String.Single
        , → Punctuation
        "b" → String.Double
        /* note */ → Comment.Multiline
        0x1F → Number.Hex
        ) → Punctuation
    """

    name = 'InlinerParams'
    aliases = ['inliner-params']
    filenames = []
    flags = re.DOTALL

    tokens = {
        'root': [
            (r'\s+', Whitespace),
            (r'/\*.*?\*/', Comment.Multiline),
            (r'/\*.*', Comment.Multiline),
            (r'//[^\n]*', Comment.Single),

            # Closed strings; backslash escapes anything, including quotes
            (r'"(?:[^"\\\n]|\\.)*"', String.Double),
            (r"'(?:[^'\\\n]|\\.)*'", String.Single),
            (r'`(?:[^`\\]|\\.)*`', String.Backtick),

            # Strings that never close
            (r'"(?:[^"\\\n]|\\.)*', UnclosedString),
            (r"'(?:[^'\\\n]|\\.)*", UnclosedString),
            (r'`(?:[^`\\]|\\.)*', UnclosedString),

            (r'-?0[xX][0-9a-fA-F]+', Number.Hex),
            (r'-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?', Number),

            (r'[A-Za-z_$][\w$]*', Name),
            (r'[,)]', Punctuation),
            (r'.', Error),
        ],
    }


def get_lexer() -> ParamLexer:
    """
    Get a ParamLexer instance

    Returns:
        ParamLexer instance ready for get_tokens_unprocessed()
    """
    return ParamLexer()

"""
Parser and serializer for pipe chains

A pipe chain describes a target plus the transforms applied to it:

    name[:arg[,arg]*][|name[:arg[,arg]*]]*

Names escape ":" and "|" with a backslash, arguments escape "," and "|".
Whitespace around names and arguments is ignored.

Example:
    >>> pipes_parse("a.txt|indent:2|wrap:<b>,</b>")
    [PipeSegment(name='a.txt', args=[]), PipeSegment(name='indent', args=['2']),
     PipeSegment(name='wrap', args=['<b>', '</b>'])]
    >>> pipes_toString(pipes_parse("a\\\\:b:c\\\\,d"))
    'a\\\\:b:c\\\\,d'
"""

import re
from typing import Any, List

from ..models.pipes import PipeSegment
from .errors import PipeSyntaxError

NAME = re.compile(r'\s*((?:\\:|\\\||[^:|])+?)\s*([:|]|\Z)', re.DOTALL)
VALUE = re.compile(r'\s*((?:\\\||\\,|[^|,])+?)\s*([,|]|\Z)', re.DOTALL)


def pipes_parse(text: str) -> List[PipeSegment]:
    """
    Split pipe chain text into segments

    Args:
        text: Pipe chain text, e.g. "file:a.txt|trim"

    Returns:
        Segments in order; empty text gives []

    Raises:
        PipeSyntaxError: A segment without a name (e.g. "a||b")
    """
    output: List[PipeSegment] = []
    pos = 0
    while pos < len(text):
        match = NAME.match(text, pos)
        if not match:
            raise PipeSyntaxError("Expecting pipe name", pos)
        pipe = PipeSegment(name=pipeName_unescape(match.group(1)))
        output.append(pipe)
        pos = match.end()
        if match.group(2) == "|":
            continue
        while pos < len(text):
            value = VALUE.match(text, pos)
            if not value:
                raise PipeSyntaxError("Expecting pipe value", pos)
            pipe.args.append(pipeValue_unescape(value.group(1)))
            pos = value.end()
            if value.group(2) == "|":
                break
    return output


def pipes_toString(pipes: List[PipeSegment]) -> str:
    """
    Serialize segments back to pipe chain text

    Left inverse of pipes_parse() on canonical text (no stray whitespace).
    Non-string arguments are converted with str().
    """
    parts = []
    for pipe in pipes:
        name = pipeName_escape(pipe.name)
        if not pipe.args:
            parts.append(name)
            continue
        args = ",".join(pipeValue_escape(str(arg)) for arg in pipe.args)
        parts.append(f"{name}:{args}")
    return "|".join(parts)


def pipeName_escape(text: Any) -> str:
    return re.sub(r'([:|])', r'\\\1', str(text))


def pipeValue_escape(text: Any) -> str:
    return re.sub(r'([,|])', r'\\\1', str(text))


def pipeName_unescape(text: str) -> str:
    return re.sub(r'\\([:|])', r'\1', text)


def pipeValue_unescape(text: str) -> str:
    return re.sub(r'\\([,|])', r'\1', text)

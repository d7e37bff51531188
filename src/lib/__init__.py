"""
inliner - Recursive textual include engine

Finds $inline directives in text, resolves the resources they name, and
substitutes their transformed content in place.
"""

__version__ = "1.0.0"

from .parser import Parser, text_parse
from .pipes import pipes_parse, pipes_toString
from .shortcuts import ShortcutExpander
from .resources import ResourceLoader
from .transformer import Transformer
from .inliner import Inliner
from .errors import (
    InlinerError,
    ParseError,
    PipeSyntaxError,
    ShortcutError,
    UnknownResource,
    UnknownTransform,
    MaxDepthExceeded,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "text_parse",
    "pipes_parse",
    "pipes_toString",
    "ShortcutExpander",
    "ResourceLoader",
    "Transformer",
    "Inliner",
    "InlinerError",
    "ParseError",
    "PipeSyntaxError",
    "ShortcutError",
    "UnknownResource",
    "UnknownTransform",
    "MaxDepthExceeded",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

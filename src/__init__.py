"""
inliner - Recursive textual include engine

A format-agnostic include preprocessor: directives embedded in any comment
syntax are replaced by the transformed content of the resources they name.
"""

__version__ = "1.0.0"

from .lib import (
    Inliner,
    Parser,
    ResourceLoader,
    ShortcutExpander,
    Transformer,
    pipes_parse,
    pipes_toString,
    InlinerError,
    ParseError,
    PipeSyntaxError,
    ShortcutError,
    UnknownResource,
    UnknownTransform,
    MaxDepthExceeded,
    LOG,
    state_connectToLogger,
)
from .models import (
    Target,
    PipeSegment,
    ResourceHandler,
    TransformHandler,
    ShortcutDefinition,
    ResolutionNode,
    TransformContext,
)

__all__ = [
    "Inliner",
    "Parser",
    "ResourceLoader",
    "ShortcutExpander",
    "Transformer",
    "pipes_parse",
    "pipes_toString",
    "InlinerError",
    "ParseError",
    "PipeSyntaxError",
    "ShortcutError",
    "UnknownResource",
    "UnknownTransform",
    "MaxDepthExceeded",
    "LOG",
    "state_connectToLogger",
    "Target",
    "PipeSegment",
    "ResourceHandler",
    "TransformHandler",
    "ShortcutDefinition",
    "ResolutionNode",
    "TransformContext",
    "__version__",
]

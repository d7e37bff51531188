"""
Models package for inliner

Contains data structures and type definitions for the resolution pipeline.
"""

from .tokens import DirectiveKind, DirectiveMatch, DirectiveToken, TextToken, Token
from .pipes import PipeSegment, Target
from .handlers import ResourceHandler, TransformHandler, ShortcutDefinition
from .resolution import Content, ResolveRequest, ResolutionNode, TransformContext

__all__ = [
    "DirectiveKind",
    "DirectiveMatch",
    "DirectiveToken",
    "TextToken",
    "Token",
    "PipeSegment",
    "Target",
    "ResourceHandler",
    "TransformHandler",
    "ShortcutDefinition",
    "Content",
    "ResolveRequest",
    "ResolutionNode",
    "TransformContext",
]

"""
Resolution request and result models

Defines the request carried down the recursive resolution, the dependency
tree node it produces, and the context passed to transforms.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, TypeVar, Union

from .pipes import Target
from .tokens import DirectiveToken


Content = Union[str, bytes]

RR = TypeVar("RR", bound="ResolveRequest")


@dataclass
class ResolveRequest:
    """
    State of one step of the recursive resolution

    Attributes:
        target: Resource to resolve
        source: Target of the including document (None at top level)
        depth: Nesting depth, 0 for the entry document
        content: Pre-supplied content; when set the resource is not read
    """
    target: Target
    source: Optional[Target] = None
    depth: int = 0
    content: Optional[Content] = None

    def child_make(self: RR, target: Target) -> RR:
        """
        Request for a target included by this request's document.

        Returns:
            New request one level deeper, sourced from this target
        """
        return replace(self, target=target, source=self.target, depth=self.depth + 1, content=None)


@dataclass
class ResolutionNode:
    """
    One entry of the dependency tree

    Attributes:
        target: Resolved target (after resolve hooks ran)
        content: Final content, text or binary. For an included target this
                 is the content after its transform chain.
        children: Nodes for the directives found in this content, in
                  document order

    Example:
        a includes b, b includes c (c = "foo"):
        ResolutionNode(target=a, content="foo", children=[
            ResolutionNode(target=b, content="foo", children=[
                ResolutionNode(target=c, content="foo", children=[])
            ])
        ])
    """
    target: Target
    content: Content
    children: List["ResolutionNode"] = field(default_factory=list)


@dataclass
class TransformContext:
    """
    What a transform knows about the directive it serves

    Attributes:
        source: Target of the document containing the directive
        source_content: Full text of that document
        directive: The directive token being resolved
        target: Target the directive resolved to
    """
    source: Target
    source_content: str
    directive: DirectiveToken
    target: Target

"""
Pipe chain and target models
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class PipeSegment:
    """
    One `name:arg,arg` element of a pipe chain

    The first segment of a chain names a target (or a shortcut), the
    following ones name transforms applied in order.
    """
    name: str
    args: List[str] = field(default_factory=list)


@dataclass
class Target:
    """
    A resource to resolve

    Attributes:
        name: Name of the resource handler (e.g., "file")
        args: Positional arguments for the handler. Handler resolve hooks
              may rewrite these in place (e.g., to make a path absolute).
    """
    name: str
    args: List[str] = field(default_factory=list)

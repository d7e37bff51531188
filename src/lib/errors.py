"""
Error taxonomy for inliner

Every failure propagates unchanged up through the recursive resolution;
the top-level resolve() raises the first error encountered.
"""

from typing import Optional


class InlinerError(Exception):
    """Base class for all inliner failures"""


class ParseError(InlinerError):
    """
    Malformed directive syntax

    Attributes:
        message: Human-readable description
        position: Offset in the source where the problem was detected
    """

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class PipeSyntaxError(ParseError):
    """Pipe chain text that cannot be split into segments"""


class ShortcutError(InlinerError):
    """Invalid or unknown shortcut definition"""


class UnknownResource(InlinerError):
    """No resource handler is registered under the target's name"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown resource {name}")


class UnknownTransform(InlinerError):
    """No transform handler is registered under the requested name"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown transformer {name}")


class MaxDepthExceeded(InlinerError):
    """Resolution nested deeper than the configured limit"""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Max recursion depth {limit} exceeded.")

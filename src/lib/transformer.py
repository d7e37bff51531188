"""
Transform pipeline

Applies the transform segments of a pipe chain to resolved content,
strictly left to right.
"""

from typing import Dict, List

from ..models.handlers import TransformHandler
from ..models.pipes import PipeSegment
from ..models.resolution import Content, TransformContext
from .errors import UnknownTransform
from .log import LOG
from .resources import result_await


class Transformer:
    """
    Registry of named transforms

    Attributes:
        transforms: Handlers keyed by name
    """

    def __init__(self) -> None:
        self.transforms: Dict[str, TransformHandler] = {}

    def add(self, handler: TransformHandler) -> None:
        self.transforms[handler.name] = handler

    def remove(self, name: str) -> None:
        self.transforms.pop(name, None)

    async def transform(
        self,
        context: TransformContext,
        content: Content,
        pipes: List[PipeSegment],
    ) -> Content:
        """
        Run content through a chain of transforms

        Args:
            context: Directive, document and targets the content belongs to
            content: Resolved content of the directive's target
            pipes: Transform segments; each is called as
                   transform(context, content, *segment.args)

        Returns:
            Output of the last transform (content itself for an empty chain)

        Raises:
            UnknownTransform: A segment names an unregistered transform. The
                              rest of the chain is not run.
        """
        for pipe in pipes:
            handler = self.transforms.get(pipe.name)
            if handler is None:
                raise UnknownTransform(pipe.name)
            LOG(f"Transform {pipe.name}{pipe.args} on {context.target.name}:{context.target.args}", level=3)
            content = await result_await(handler.transform(context, content, *pipe.args))
        return content

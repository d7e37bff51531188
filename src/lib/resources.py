"""
Resource loader: handler registry plus memoizing read cache

Handlers are looked up by target name. A handler that provides a hash
hook gets request coalescing: every read whose key is equal shares one
underlying call for the lifetime of the loader, whether the reads are
concurrent or sequential. The shared outcome is reused as-is, including
a failure. A read that was cancelled before finishing is started again.
"""

import asyncio
import inspect
from typing import Any, Dict, Optional

from ..models.handlers import ResourceHandler
from ..models.pipes import Target
from ..models.resolution import Content
from .errors import UnknownResource
from .log import LOG


async def result_await(value: Any) -> Any:
    """Return value, awaiting it first when a handler returned an awaitable"""
    if inspect.isawaitable(value):
        return await value
    return value


class ResourceLoader:
    """
    Registry of resource handlers with a per-instance read cache

    Attributes:
        handlers: Handlers keyed by target name
        cache: Hash key -> shared read task (append-only)
    """

    def __init__(self) -> None:
        self.handlers: Dict[str, ResourceHandler] = {}
        self.cache: Dict[Any, "asyncio.Future[Content]"] = {}

    def add(self, handler: ResourceHandler) -> None:
        """Register a handler, replacing any handler with the same name"""
        self.handlers[handler.name] = handler

    def remove(self, name: str) -> None:
        self.handlers.pop(name, None)

    def handler_get(self, target: Target) -> ResourceHandler:
        """
        Find the handler for a target

        Raises:
            UnknownResource: Nothing is registered under target.name
        """
        handler = self.handlers.get(target.name)
        if handler is None:
            raise UnknownResource(target.name)
        return handler

    def resolve(self, source: Optional[Target], target: Target) -> None:
        """
        Normalize target against the document that includes it

        Runs the handler's resolve hook, which may rewrite target.args in
        place. Top-level targets (no source) are left alone.
        """
        if source is None:
            return
        handler = self.handler_get(target)
        if handler.resolve is not None:
            handler.resolve(source, target)

    async def read(self, source: Optional[Target], target: Target) -> Content:
        """
        Read a target's content through its handler

        Returns:
            Text (str) or binary (bytes) content

        Raises:
            UnknownResource: Nothing is registered under target.name
        """
        handler = self.handler_get(target)
        if handler.hash is None:
            return await result_await(handler.read(source, target))

        key = handler.hash(source, target)
        task = self.cache.get(key)
        # A cancelled read (e.g. torn down with its event loop) has no outcome
        if task is None or task.cancelled():
            LOG(f"Reading {target.name}:{target.args} (key {key!r})", level=2)
            task = asyncio.ensure_future(self.handler_read(handler, source, target))
            self.cache[key] = task
        else:
            LOG(f"Cache hit for {target.name}:{target.args} (key {key!r})", level=3)
        if task.done():
            # May belong to an earlier event loop; only its outcome is needed
            return task.result()
        # Cancelling one waiter must not cancel the shared read
        return await asyncio.shield(task)

    @staticmethod
    async def handler_read(handler: ResourceHandler, source: Optional[Target], target: Target) -> Content:
        """Invoke a handler's read inside the shared task, so failures are shared too"""
        return await result_await(handler.read(source, target))

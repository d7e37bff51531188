"""
Resolution engine

Ties the parser, pipe chains, shortcuts, resource loader and transformer
together into a recursive, depth-bounded resolution that returns the
merged content plus a dependency tree.
"""

import asyncio
from typing import Any, List, Mapping, Optional, Tuple, Union

from ..config import appsettings
from ..models.handlers import ResourceHandler, ShortcutDefinition, TransformHandler, handler_coerce
from ..models.pipes import PipeSegment, Target
from ..models.resolution import Content, ResolveRequest, ResolutionNode, TransformContext
from ..models.tokens import DirectiveKind, DirectiveToken, TextToken
from .errors import MaxDepthExceeded, ParseError
from .log import LOG, state_connectToLogger
from .parser import Parser
from .pipes import pipes_parse
from .resources import ResourceLoader
from .shortcuts import ShortcutExpander
from .transformer import Transformer


class Inliner:
    """
    Resolves directives in documents, recursively

    Responsibilities:
    - Enforce the depth limit
    - Read documents through the resource loader
    - Register shortcut declarations into a per-document scope
    - Resolve sibling directives concurrently and join them in order
    - Apply transform chains to included content
    - Build the dependency tree

    Each Inliner owns its registries and its read cache; nothing is shared
    between instances.
    """

    def __init__(
        self,
        max_depth: Optional[int] = None,
        resource: Optional[ResourceLoader] = None,
        transformer: Optional[Transformer] = None,
        global_shortcuts: Optional[ShortcutExpander] = None,
        default_resource: Optional[str] = None,
        marker: Optional[str] = None,
        text_encoding: Optional[str] = None,
        verbosity: Optional[int] = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            max_depth: Deepest allowed nesting (entry document is depth 0)
            resource: Resource loader, a fresh one if omitted
            transformer: Transform registry, a fresh one if omitted
            global_shortcuts: Scope every document's local scope is cloned from
            default_resource: Resource name for pipe heads without arguments
            marker: Directive marker text
            text_encoding: Encoding for text joined with binary content
            verbosity: Logging verbosity (0-3)

        Unset values fall back to appsettings.
        """
        self.max_depth = appsettings.max_depth if max_depth is None else max_depth
        self.resource = resource if resource is not None else ResourceLoader()
        self.transformer = transformer if transformer is not None else Transformer()
        self.global_shortcuts = global_shortcuts if global_shortcuts is not None else ShortcutExpander()
        self.default_resource = default_resource or appsettings.default_resource
        self.marker = marker or appsettings.marker
        self.text_encoding = text_encoding or appsettings.text_encoding
        self.verbosity = appsettings.verbosity if verbosity is None else verbosity

    def config_use(self, conf: Optional[Mapping[str, Any]]) -> None:
        """
        Bulk-register handlers from a configuration mapping

        Args:
            conf: Mapping with optional "resources", "transforms" and
                  "shortcuts" lists. Entries are handler instances or
                  mappings of their fields. None is ignored.

        Example:
            inliner.config_use({
                "resources": [{"name": "text", "read": lambda s, t: t.args[0]}],
                "shortcuts": [ShortcutDefinition("pkg", "file:package.json|json")],
            })
        """
        if not conf:
            return
        for entry in conf.get("resources") or []:
            self.resource.add(handler_coerce(ResourceHandler, entry))
        for entry in conf.get("transforms") or []:
            self.transformer.add(handler_coerce(TransformHandler, entry))
        for entry in conf.get("shortcuts") or []:
            self.global_shortcuts.add(handler_coerce(ShortcutDefinition, entry))

    async def resolve(
        self,
        target: Target,
        source: Optional[Target] = None,
        content: Optional[Content] = None,
    ) -> ResolutionNode:
        """
        Resolve a target and everything it includes

        Args:
            target: Entry target
            source: Optional target the entry is relative to
            content: Optional entry content; when given the target is not read

        Returns:
            Root ResolutionNode holding the merged content

        Raises:
            InlinerError: The first failure anywhere in the tree. No partial
                          result is returned.
        """
        state_connectToLogger(self)
        LOG(f"Resolving {target.name}:{target.args}", level=1)
        node = await self.request_resolve(ResolveRequest(target=target, source=source, content=content))
        LOG(f"Resolved {target.name}:{target.args} with {len(node.children)} direct includes", level=1)
        return node

    def resolve_sync(
        self,
        target: Target,
        source: Optional[Target] = None,
        content: Optional[Content] = None,
    ) -> ResolutionNode:
        """Run resolve() in a new event loop, for callers without one"""
        return asyncio.run(self.resolve(target, source, content))

    async def request_resolve(self, request: ResolveRequest) -> ResolutionNode:
        """
        Resolve one document

        Steps:
        1. Check the depth limit
        2. Let the resource handler normalize the target
        3. Clone the global shortcut scope for this document
        4. Read the content (unless supplied)
        5. Binary content is a leaf; text is parsed and each directive is
           resolved concurrently, then joined in document order
        """
        if request.depth > self.max_depth:
            raise MaxDepthExceeded(self.max_depth)

        target = request.target
        self.resource.resolve(request.source, target)
        shortcuts = self.global_shortcuts.clone()

        content = request.content
        if content is None:
            content = await self.resource.read(request.source, target)
        content = self.content_check(content, target)

        if isinstance(content, bytes):
            LOG(f"{target.name}:{target.args} is binary ({len(content)} bytes)", level=2)
            return ResolutionNode(target=target, content=content, children=[])

        tokens = Parser(content, self.marker).parse()
        LOG(f"{target.name}:{target.args} depth {request.depth}: {len(tokens)} tokens", level=2)

        parts: List[Union[str, "asyncio.Task[ResolutionNode]"]] = []
        tasks: List["asyncio.Task[ResolutionNode]"] = []
        try:
            for token in tokens:
                if isinstance(token, TextToken):
                    parts.append(token.value)
                elif token.kind == DirectiveKind.SHORTCUT:
                    name, expand = token.params[0], token.params[1]
                    shortcuts.add(ShortcutDefinition(name=str(name), expand=expand))
                    LOG(f"Shortcut {name} declared in {target.name}:{target.args}", level=2)
                else:
                    # Expansion runs now so later declarations stay invisible
                    inline_target, transforms = self.directive_expand(target, token, shortcuts)
                    task = asyncio.ensure_future(
                        self.directive_resolve(request, content, token, inline_target, transforms)
                    )
                    tasks.append(task)
                    parts.append(task)
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        children = [task.result() for task in tasks]
        joined = self.content_join(
            [part if isinstance(part, str) else part.result().content for part in parts]
        )
        return ResolutionNode(target=target, content=joined, children=children)

    def directive_expand(
        self,
        source: Target,
        token: DirectiveToken,
        shortcuts: ShortcutExpander,
    ) -> Tuple[Target, List[PipeSegment]]:
        """
        Turn a directive's first parameter into a target and transform chain

        Shortcut heads are expanded and re-parsed until the head is no
        longer a shortcut. A head without arguments names a resource of the
        default kind: "a.txt" becomes Target(default_resource, ["a.txt"]).

        Returns:
            Tuple of (inline target, transform segments)
        """
        if not token.params:
            raise ParseError("Directive requires a target parameter", token.start)

        pipes = self.pipes_require(str(token.params[0]), token)
        expansions = 0
        while shortcuts.has(pipes[0].name):
            if expansions >= self.max_depth:
                raise MaxDepthExceeded(self.max_depth)
            pipes = self.pipes_require(shortcuts.expand(source, pipes), token)
            expansions += 1

        head = pipes[0]
        if head.args:
            inline_target = Target(name=head.name, args=list(head.args))
        else:
            inline_target = Target(name=self.default_resource, args=[head.name])
        return inline_target, pipes[1:]

    @staticmethod
    def pipes_require(text: str, token: DirectiveToken) -> List[PipeSegment]:
        pipes = pipes_parse(text)
        if not pipes:
            raise ParseError("Directive target is empty", token.start)
        return pipes

    async def directive_resolve(
        self,
        request: ResolveRequest,
        source_content: str,
        token: DirectiveToken,
        inline_target: Target,
        transforms: List[PipeSegment],
    ) -> ResolutionNode:
        """
        Resolve an included target one level deeper and transform the result

        The returned node's content is the transformed content.
        """
        node = await self.request_resolve(request.child_make(inline_target))
        context = TransformContext(
            source=request.target,
            source_content=source_content,
            directive=token,
            target=inline_target,
        )
        node.content = self.content_check(
            await self.transformer.transform(context, node.content, transforms),
            inline_target,
        )
        return node

    def content_join(self, contents: List[Content]) -> Content:
        """
        Concatenate segments; any binary segment makes the result binary

        Text segments are encoded with text_encoding before concatenation.
        """
        if any(isinstance(content, bytes) for content in contents):
            return b"".join(
                content if isinstance(content, bytes) else content.encode(self.text_encoding)
                for content in contents
            )
        return "".join(contents)

    @staticmethod
    def content_check(content: Any, target: Target) -> Content:
        """Normalize handler output to str or bytes"""
        if isinstance(content, (str, bytes)):
            return content
        if isinstance(content, (bytearray, memoryview)):
            return bytes(content)
        raise TypeError(
            f"Content for {target.name}:{target.args} must be str or bytes, got {type(content).__name__}"
        )

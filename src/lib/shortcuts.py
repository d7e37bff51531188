"""
Scoped shortcut (macro) registry

A shortcut rewrites the head of a pipe chain into a longer chain. The
expansion is either a template string:

    "b|t:$1"    with "foo:baz"      ->  "b|t:baz"
    "a|t:$&"    with "foo:x,y"      ->  "a|t:x,y"

or a callable receiving (target, *args) and returning chain text.

Scopes form a chain: clone() returns a child that falls back to its parent
for lookups, while the parent never sees the child's registrations.
"""

import re
from typing import Dict, List, Optional

from ..models.handlers import ShortcutDefinition
from ..models.pipes import PipeSegment, Target
from .errors import ShortcutError
from .pipes import pipeValue_escape, pipes_toString

PLACEHOLDER = re.compile(r'\$(\d+|&)')


class ShortcutExpander:
    """
    Name-keyed shortcut registry with parent fallback

    Attributes:
        shortcuts: Definitions registered directly in this scope
        parent: Scope this one was cloned from (lookup fallback only)
    """

    def __init__(self, parent: Optional["ShortcutExpander"] = None) -> None:
        self.shortcuts: Dict[str, ShortcutDefinition] = {}
        self.parent = parent

    def add(self, shortcut: ShortcutDefinition) -> None:
        """
        Register a shortcut in this scope

        Raises:
            ShortcutError: expand is neither a string nor a callable
        """
        if not isinstance(shortcut.expand, str) and not callable(shortcut.expand):
            raise ShortcutError("shortcut.expand must be a string or a function")
        self.shortcuts[shortcut.name] = shortcut

    def remove(self, name: str) -> None:
        """Remove a shortcut from this scope (parents are untouched)"""
        self.shortcuts.pop(name, None)

    def clone(self) -> "ShortcutExpander":
        """Create a child scope that falls back to this one"""
        return ShortcutExpander(parent=self)

    def has(self, name: str) -> bool:
        if name in self.shortcuts:
            return True
        return self.parent is not None and self.parent.has(name)

    def lookup(self, name: str) -> ShortcutDefinition:
        """
        Find a shortcut in this scope or its ancestors

        Raises:
            ShortcutError: name is not registered anywhere in the chain
        """
        scope: Optional[ShortcutExpander] = self
        while scope is not None:
            if name in scope.shortcuts:
                return scope.shortcuts[name]
            scope = scope.parent
        raise ShortcutError(f"Unknown shortcut {name}")

    def expand(self, target: Optional[Target], pipes: List[PipeSegment]) -> str:
        """
        Expand a chain whose head segment names a shortcut

        Args:
            target: Target of the document containing the invocation,
                    passed to callable expansions
            pipes: Parsed chain; pipes[0] is the shortcut invocation

        Returns:
            Expansion text, followed by the remaining segments of the
            chain serialized after a "|"

        Example:
            >>> shortcuts = ShortcutExpander()
            >>> shortcuts.add(ShortcutDefinition("test", "a.txt|tr"))
            >>> shortcuts.expand(None, pipes_parse("test|tr2|tr3"))
            'a.txt|tr|tr2|tr3'
        """
        shortcut, transforms = pipes[0], pipes[1:]
        expander = self.lookup(shortcut.name).expand

        if isinstance(expander, str):
            expanded = self.template_substitute(expander, shortcut.args)
        else:
            expanded = str(expander(target, *shortcut.args))

        if not transforms:
            return expanded
        return f"{expanded}|{pipes_toString(transforms)}"

    @staticmethod
    def template_substitute(template: str, args: List[str]) -> str:
        """
        Fill $1..$N and $& placeholders

        Positions beyond the supplied arguments (and $0) become empty.
        """

        def placeholder_fill(match: re.Match[str]) -> str:
            key = match.group(1)
            if key == "&":
                return ",".join(pipeValue_escape(arg) for arg in args)
            index = int(key)
            if 1 <= index <= len(args):
                return str(args[index - 1])
            return ""

        return PLACEHOLDER.sub(placeholder_fill, template)


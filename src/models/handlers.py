"""
Handler definition models

Defines the pluggable capabilities the engine calls through: resource
handlers, transform handlers and shortcut definitions. Each is registered
by name in its own registry.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

H = TypeVar("H")


@dataclass
class ResourceHandler:
    """
    Provider of content for one kind of target

    Attributes:
        name: Target name served by this handler (e.g., "file", "url")
        read: (source, target) -> str | bytes, or an awaitable of either
        hash: Optional (source, target) -> hashable cache key. Reads with
              equal keys are performed once per loader.
        resolve: Optional (source, target) -> None hook that normalizes
                 target.args against the including source
    """
    name: str
    read: Callable[..., Any]
    hash: Optional[Callable[..., Any]] = None
    resolve: Optional[Callable[..., Any]] = None


@dataclass
class TransformHandler:
    """
    Named post-processing step

    Attributes:
        name: Name used in pipe chains (e.g., "trim" in "a.txt|trim")
        transform: (context, content, *args) -> content, or an awaitable
    """
    name: str
    transform: Callable[..., Any]


@dataclass
class ShortcutDefinition:
    """
    Named rewrite rule for pipe chains

    Attributes:
        name: Shortcut name, matched against the head segment of a chain
        expand: Template string using $1..$N and $& placeholders, or a
                callable (target, *args) -> str
    """
    name: str
    expand: Union[str, Callable[..., str]]


def handler_coerce(cls: Type[H], value: Union[H, Mapping[str, Any]]) -> H:
    """
    Accept either a handler instance or a mapping of its fields

    Used by the bulk configuration helper so that plain dicts can be
    registered alongside dataclass instances.
    """
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        fields: Dict[str, Any] = dict(value)
        return cls(**fields)
    raise TypeError(f"Expected {cls.__name__} or mapping, got {type(value).__name__}")

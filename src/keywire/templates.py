from __future__ import annotations

import functools
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Generic, TypeAlias, TypeVar

from keywire.keys import Key

T = TypeVar("T")


class Lifetime(Enum):
    """Define cache behavior for construction bindings."""

    TRANSIENT = auto()
    """Build a new value for every resolution."""

    SINGLETON = auto()
    """Build once per container and reuse the cached value afterwards.

    Only singleton members can close a dependency cycle.
    """


@dataclass(frozen=True, slots=True)
class Constant(Generic[T]):
    """Resolve to a fixed value. Constants have no dependencies and are never cached."""

    value: T

    @property
    def dependencies(self) -> tuple[Key[Any], ...]:
        return ()

    def resolve(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class BoundFunction:
    """Resolve to ``function`` partially applied to its resolved dependencies.

    Bound functions are always transient: every resolution produces a new
    ``functools.partial``.
    """

    function: Callable[..., Any]
    dependencies: tuple[Key[Any], ...] = field(default=())

    @property
    def lifetime(self) -> Lifetime:
        return Lifetime.TRANSIENT

    def resolve(self, resolved_dependencies: Sequence[Any]) -> Callable[..., Any]:
        return functools.partial(self.function, *resolved_dependencies)


@dataclass(frozen=True, slots=True)
class InjectedClass:
    """Resolve by calling ``factory`` with its resolved dependencies.

    ``factory`` is usually a class but any callable returning the value works.
    """

    factory: Callable[..., Any]
    dependencies: tuple[Key[Any], ...] = field(default=())
    lifetime: Lifetime = Lifetime.TRANSIENT

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    def resolve(self, resolved_dependencies: Sequence[Any]) -> Any:
        return self.factory(*resolved_dependencies)


Template: TypeAlias = Constant[Any] | BoundFunction | InjectedClass
"""Registered description of how to produce a value."""

TEMPLATE_TYPES: tuple[type[Any], ...] = (Constant, BoundFunction, InjectedClass)


def is_singleton_template(template: Template) -> bool:
    """Return whether ``template`` is cached for the lifetime of a container."""
    return isinstance(template, InjectedClass) and template.is_singleton


__all__ = [
    "TEMPLATE_TYPES",
    "BoundFunction",
    "Constant",
    "InjectedClass",
    "Lifetime",
    "Template",
    "is_singleton_template",
]

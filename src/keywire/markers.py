from __future__ import annotations

import functools
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from keywire.exceptions import KeywireInvalidRegistrationError
from keywire.keys import Key

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type[Any])

DEPENDENCIES_ATTR = "__keywire_dependencies__"
"""Attribute that carries the ordered dependency keys of a factory."""


def inject(cls: C, dependencies: Sequence[Key[Any]]) -> C:
    """Attach constructor dependency keys to a class and return the class.

    The keys are passed positionally to the constructor, in order, when the
    class is built by a container.

    Args:
        cls: Class to annotate.
        dependencies: Keys for the constructor's positional parameters.

    Examples:
        .. code-block:: python

            builder.register_singleton(keys.Repo, inject(SqlRepo, [keys.Engine]))

    """
    setattr(cls, DEPENDENCIES_ATTR, _validated_dependencies(cls, dependencies))
    return cls


def bind(func: F, dependencies: Sequence[Key[Any]]) -> F:
    """Return a wrapper of ``func`` carrying the keys of its leading parameters.

    The original function is left untouched so the same function can be bound
    with different keys. When registered with ``register_function`` the
    container resolves to ``func`` partially applied to the resolved keys.

    Args:
        func: Function to bind.
        dependencies: Keys for the first ``len(dependencies)`` parameters.

    """

    @functools.wraps(func)
    def bound(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    setattr(bound, DEPENDENCIES_ATTR, _validated_dependencies(func, dependencies))
    return bound  # type: ignore[return-value]


def depends_on(*dependencies: Key[Any]) -> Callable[[F], F]:
    """Decorator form of ``inject`` that works for classes and functions alike.

    Examples:
        .. code-block:: python

            @depends_on(keys.Engine, keys.Settings)
            class SqlRepo:
                def __init__(self, engine: Engine, settings: Settings) -> None: ...

    """

    def decorator(target: F) -> F:
        setattr(target, DEPENDENCIES_ATTR, _validated_dependencies(target, dependencies))
        return target

    return decorator


def dependencies_of(target: Any) -> tuple[Key[Any], ...]:
    """Return the dependency keys attached to ``target``.

    Raises:
        KeywireInvalidRegistrationError: If no keys were attached.

    """
    dependencies = getattr(target, DEPENDENCIES_ATTR, None)
    if dependencies is None:
        msg = (
            f"{_target_name(target)} has no dependency metadata; wrap it with inject()/bind(), "
            "decorate it with depends_on(), or pass dependencies explicitly."
        )
        raise KeywireInvalidRegistrationError(msg)
    return tuple(dependencies)


def _validated_dependencies(target: Any, dependencies: Sequence[Key[Any]]) -> tuple[Key[Any], ...]:
    if isinstance(dependencies, (str, bytes)):
        msg = f"Dependencies of {_target_name(target)} must be a sequence of keys, got a string."
        raise KeywireInvalidRegistrationError(msg)
    for dependency in dependencies:
        if not isinstance(dependency, Key):
            msg = f"Dependency {dependency!r} of {_target_name(target)} is not a Key."
            raise KeywireInvalidRegistrationError(msg)
    return tuple(dependencies)


def _target_name(target: Any) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


__all__ = ["DEPENDENCIES_ATTR", "bind", "dependencies_of", "depends_on", "inject"]

from __future__ import annotations

from keywire.graph import DependencyGraphNode, render_dependency_path


class KeywireError(Exception):
    """Represent a base class for all keywire-specific failures.

    Catch this type when you want to handle any keywire error path without
    matching each concrete exception class individually.
    """


class KeywireInvalidRegistrationError(KeywireError):
    """Signal invalid registration input.

    Raised by ``ContainerBuilder`` registration methods when a factory is not
    callable, when no dependency keys were passed and none are attached to the
    factory, when a dependency entry is not a ``Key``, or when
    ``register_settings`` receives a type that is not a settings model.

    Typical fixes include decorating the factory with ``depends_on`` (or
    wrapping it with ``inject``/``bind``) or passing ``dependencies=[...]``
    explicitly.
    """


class DuplicateKeyError(KeywireError):
    """Signal that a key name is already assigned.

    Raised at registration time by ``ContainerBuilder`` for every template
    kind, and by ``Keys.add_key``. Choose a different key name.
    """

    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        msg = f"'{key_name}' is already assigned."
        super().__init__(msg)


class MissingInjectableError(KeywireError):
    """Signal that the key requested from ``Container.get`` is not registered."""

    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        msg = f"Injectable with key name '{key_name}' not found. Was it registered?"
        super().__init__(msg)


class MissingDependencyError(KeywireError):
    """Signal that a dependency declared by a registered template is not registered.

    Unlike ``MissingInjectableError`` this is raised for nested requests. The
    error keeps the graph node of the missing key so callers can inspect the
    full chain that led to it.

    Attributes:
        key_name: Name of the missing key.
        node: Graph node of the missing key; its parents lead back to the root.
        dependency_path: Rendered ``Root-->...-->Missing`` path.

    """

    def __init__(self, node: DependencyGraphNode) -> None:
        self.key_name = node.key_name
        self.node = node
        self.dependency_path = render_dependency_path(node)
        msg = (
            f"Service with key '{node.key_name}' not found. "
            f"Dependency graph is {self.dependency_path}."
        )
        super().__init__(msg)


class CircularDependencyError(KeywireError):
    """Signal a dependency cycle that cannot be broken.

    A cycle is only resolvable when every member is a singleton, because a
    forward reference can stand in for a singleton that is still being built.
    A transient member would have to exist before its own construction
    starts, so there is no valid construction order.

    Typical fixes are registering every member of the cycle with
    ``register_singleton`` or restructuring the dependencies to remove the
    cycle.

    Attributes:
        key_name: Name of the key found again in its own ancestry.
        cycle: Key names of the loop, starting and ending with ``key_name``.

    """

    def __init__(self, key_name: str, cycle: tuple[str, ...] = ()) -> None:
        self.key_name = key_name
        self.cycle = cycle
        msg = (
            f"A circular dependency was found when resolving '{key_name}'. "
            "All members of a dependency cycle must be singletons."
        )
        if cycle:
            msg = f"{msg} Cycle: {'-->'.join(cycle)}."
        super().__init__(msg)


class UninitializedPropertyAccessError(KeywireError):
    """Signal use of a forward reference before its singleton finished building.

    Raised when a constructor in a singleton cycle reads, writes, or inspects
    another member of the cycle during its own construction. Holding the
    reference is fine; dereferencing it must wait until resolution returns.
    """

    def __init__(self, key_name: str | None = None) -> None:
        self.key_name = key_name
        msg = (
            "A singleton that is part of a dependency cycle accessed a property of "
            "another member of that cycle in its constructor before the cycle "
            "could be resolved."
        )
        if key_name is not None:
            msg = f"{msg} Unresolved member: '{key_name}'."
        super().__init__(msg)

"""Common error classes for troubleshooting.

This module triggers representative error paths and prints exception type
names and details so you can recognize each error category quickly.
"""

from __future__ import annotations

from keywire import (
    CircularDependencyError,
    ContainerBuilder,
    DuplicateKeyError,
    KeywireInvalidRegistrationError,
    Keys,
    MissingDependencyError,
    MissingInjectableError,
    UninitializedPropertyAccessError,
    depends_on,
)

keys = (
    Keys.create()
    .add_key("Root")
    .for_type(object)
    .add_key("Leaf")
    .for_type(object)
    .add_key("Missing")
    .for_type(object)
    .add_key("Left")
    .for_type(object)
    .add_key("Right")
    .for_type(object)
)


class Root:
    def __init__(self, leaf: object) -> None:
        self.leaf = leaf


class Leaf:
    def __init__(self, missing: object) -> None:
        self.missing = missing


@depends_on(keys.Right)
class Left:
    def __init__(self, right: Right) -> None:
        self.right = right


@depends_on(keys.Left)
class Right:
    def __init__(self, left: Left) -> None:
        self.left = left


@depends_on(keys.Left)
class EagerRight:
    def __init__(self, left: Left) -> None:
        self.left_right = left.right


def main() -> None:
    builder = ContainerBuilder.create().register_constant(keys.Leaf, 1)
    try:
        builder.register_constant(keys.Leaf, 2)
    except DuplicateKeyError as error:
        duplicate = type(error).__name__
    print(f"duplicate={duplicate}")  # => duplicate=DuplicateKeyError

    try:
        ContainerBuilder.create().register_transient(keys.Root, Root)
    except KeywireInvalidRegistrationError as error:
        invalid_reg = type(error).__name__
    print(f"invalid_reg={invalid_reg}")  # => invalid_reg=KeywireInvalidRegistrationError

    empty = ContainerBuilder.create().build()
    try:
        empty.get("Nothing")
    except MissingInjectableError as error:
        missing_root = type(error).__name__
    print(f"missing_root={missing_root}")  # => missing_root=MissingInjectableError

    nested = (
        ContainerBuilder.create()
        .register_transient(keys.Root, Root, dependencies=[keys.Leaf])
        .register_transient(keys.Leaf, Leaf, dependencies=[keys.Missing])
        .build()
    )
    try:
        nested.get(keys.Root)
    except MissingDependencyError as error:
        path = error.dependency_path
    print(f"path={path}")  # => path=Root-->Leaf-->Missing

    mixed = (
        ContainerBuilder.create()
        .register_singleton(keys.Left, Left)
        .register_transient(keys.Right, Right)
        .build()
    )
    try:
        mixed.get(keys.Left)
    except CircularDependencyError as error:
        cycle = "-->".join(error.cycle)
    print(f"cycle={cycle}")  # => cycle=Left-->Right-->Left

    eager = (
        ContainerBuilder.create()
        .register_singleton(keys.Left, Left)
        .register_singleton(keys.Right, EagerRight)
        .build()
    )
    try:
        eager.get(keys.Left)
    except UninitializedPropertyAccessError as error:
        early_access = error.key_name
    print(f"early_access={early_access}")  # => early_access=Left


if __name__ == "__main__":
    main()

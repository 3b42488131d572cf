from __future__ import annotations

import pytest

from keywire.exceptions import KeywireInvalidRegistrationError
from keywire.keys import Key
from keywire.markers import DEPENDENCIES_ATTR, bind, dependencies_of, depends_on, inject

FIRST = Key("First", int)
SECOND = Key("Second", int)


def add(first: int, second: int, third: int) -> int:
    return first + second + third


def test_inject_attaches_dependencies_to_class() -> None:
    class Service:
        def __init__(self, first: int, second: int) -> None:
            self.total = first + second

    injected = inject(Service, [FIRST, SECOND])

    assert injected is Service
    assert dependencies_of(Service) == (FIRST, SECOND)


def test_bind_returns_wrapper_and_leaves_function_untouched() -> None:
    bound = bind(add, [FIRST, SECOND])

    assert bound is not add
    assert bound(1, 2, 3) == 6
    assert bound.__name__ == "add"
    assert dependencies_of(bound) == (FIRST, SECOND)
    assert not hasattr(add, DEPENDENCIES_ATTR)


def test_same_function_can_be_bound_twice() -> None:
    first_binding = bind(add, [FIRST])
    second_binding = bind(add, [SECOND, FIRST])

    assert dependencies_of(first_binding) == (FIRST,)
    assert dependencies_of(second_binding) == (SECOND, FIRST)


def test_depends_on_decorates_classes_and_functions() -> None:
    @depends_on(FIRST)
    class Service:
        def __init__(self, first: int) -> None:
            self.first = first

    @depends_on(SECOND, FIRST)
    def factory(second: int, first: int) -> int:
        return second - first

    assert dependencies_of(Service) == (FIRST,)
    assert dependencies_of(factory) == (SECOND, FIRST)
    assert factory(3, 1) == 2


def test_empty_dependencies_are_allowed() -> None:
    assert dependencies_of(inject(type("Empty", (), {}), [])) == ()


def test_missing_metadata_raises() -> None:
    def plain() -> None:
        pass

    with pytest.raises(KeywireInvalidRegistrationError, match="plain"):
        dependencies_of(plain)


def test_non_key_dependency_raises() -> None:
    with pytest.raises(KeywireInvalidRegistrationError, match="is not a Key"):
        bind(add, ["First"])  # type: ignore[list-item]


def test_string_dependencies_raise() -> None:
    with pytest.raises(KeywireInvalidRegistrationError, match="sequence of keys"):
        inject(type("Service", (), {}), "First")  # type: ignore[arg-type]

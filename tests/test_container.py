"""Tests for Container resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from keywire.container import Container
from keywire.keys import Key, Keys
from keywire.markers import bind, inject
from keywire.registry import ContainerBuilder


def multiply(num1: float, num2: float) -> float:
    return num1 * num2


def apply_bi_func(bi_func: Callable[[float, float], float], num1: float, num2: float) -> float:
    return bi_func(num1, num2)


class TestConstants:
    def test_getting_a_constant_returns_its_value(self, builder: ContainerBuilder) -> None:
        key = Key("TestConstant", str)
        container = builder.register_constant(key, "test").build()

        assert container.get(key) == "test"

    def test_constant_value_is_returned_as_is(self, builder: ContainerBuilder) -> None:
        key = Key("Settings", dict)
        settings: dict[str, Any] = {"debug": True}
        container = builder.register_constant(key, settings).build()

        assert container.get(key) is settings
        assert container.get(key) is container.get(key)


class TestFunctions:
    def test_getting_a_function_returns_the_function(self, builder: ContainerBuilder) -> None:
        def test_function() -> str:
            return "test"

        key = Key("TestFunction")
        container = builder.register_function(key, bind(test_function, [])).build()

        assert container.get(key)() == "test"

    def test_function_dependencies_are_bound_in_declared_order(
        self,
        builder: ContainerBuilder,
    ) -> None:
        keys = (
            Keys.create()
            .add_key("Multiply")
            .for_type(Callable[[float, float], float])
            .add_key("ApplyTaxes")
            .for_type(Callable[[float], float])
            .add_key("TaxRate")
            .for_type(float)
        )

        container = (
            builder.register_constant(keys.TaxRate, 1.06)
            .register_function(keys.Multiply, bind(multiply, []))
            .register_function(keys.ApplyTaxes, bind(apply_bi_func, [keys.Multiply, keys.TaxRate]))
            .build()
        )

        assert container.get(keys.ApplyTaxes)(100) == 106

    def test_function_registered_with_explicit_dependencies(
        self,
        builder: ContainerBuilder,
    ) -> None:
        prefix = Key("Prefix", str)
        greet = Key("Greet")

        def greeting(prefix_value: str, name: str) -> str:
            return f"{prefix_value}, {name}"

        container = (
            builder.register_constant(prefix, "Hello")
            .register_function(greet, greeting, dependencies=[prefix])
            .build()
        )

        assert container.get(greet)("keywire") == "Hello, keywire"


class TestClasses:
    def test_transient_returns_new_instance_each_time(self, builder: ContainerBuilder) -> None:
        class TestClass:
            pass

        key = Key("TestClass", TestClass)
        container = builder.register_transient(key, inject(TestClass, [])).build()

        instance_a = container.get(key)
        instance_b = container.get(key)

        assert isinstance(instance_a, TestClass)
        assert isinstance(instance_b, TestClass)
        assert instance_a is not instance_b

    def test_transient_instances_are_independent(self, builder: ContainerBuilder) -> None:
        class Counter:
            def __init__(self) -> None:
                self.count = 0

        key = Key("Counter", Counter)
        container = builder.register_transient(key, Counter, dependencies=[]).build()

        first = container.get(key)
        first.count += 1

        assert container.get(key).count == 0

    def test_singleton_returns_same_instance_each_time(self, builder: ContainerBuilder) -> None:
        class Singleton:
            def __init__(self) -> None:
                self.count = 0

            def increment(self) -> None:
                self.count += 1

        key = Key("Singleton", Singleton)
        container = builder.register_singleton(key, inject(Singleton, [])).build()

        first_retrieval = container.get(key)
        second_retrieval = container.get(key)
        first_retrieval.increment()
        second_retrieval.increment()

        assert first_retrieval is second_retrieval
        assert first_retrieval.count == 2

    def test_class_dependencies_are_resolved(self, builder: ContainerBuilder) -> None:
        keys = (
            Keys.create()
            .add_key("Multiply")
            .for_type(Callable[[float, float], float])
            .add_key("ApplyDiscount")
            .for_type(Callable[[float], float])
            .add_key("Discount")
            .for_type(float)
            .add_key("SaleItem")
            .for_type(object)
        )

        class DesktopComputer:
            normal_price = 500

            def __init__(self, apply_discount: Callable[[float], float]) -> None:
                self.apply_discount = apply_discount

            def get_discounted_price(self) -> float:
                return self.apply_discount(self.normal_price)

        container = (
            builder.register_constant(keys.Discount, 0.9)
            .register_function(keys.Multiply, bind(multiply, []))
            .register_function(keys.ApplyDiscount, bind(apply_bi_func, [keys.Multiply, keys.Discount]))
            .register_transient(keys.SaleItem, inject(DesktopComputer, [keys.ApplyDiscount]))
            .build()
        )

        assert container.get(keys.SaleItem).get_discounted_price() == 450

    def test_dependencies_are_resolved_in_declared_order(self, builder: ContainerBuilder) -> None:
        calls: list[str] = []

        def make_recorder(name: str) -> Callable[[], str]:
            def record() -> str:
                calls.append(name)
                return name

            return record

        first = Key("First", str)
        second = Key("Second", str)
        third = Key("Third", str)
        combined = Key("Combined", tuple)

        container = (
            builder.register_transient(first, make_recorder("first"), dependencies=[])
            .register_transient(second, make_recorder("second"), dependencies=[])
            .register_transient(third, make_recorder("third"), dependencies=[])
            .register_transient(
                combined,
                lambda *values: values,
                dependencies=[third, first, second],
            )
            .build()
        )

        assert container.get(combined) == ("third", "first", "second")
        assert calls == ["third", "first", "second"]

    def test_singleton_first_built_as_dependency_is_shared(self, builder: ContainerBuilder) -> None:
        class Counter:
            def __init__(self) -> None:
                self.count = 0

        class CounterIncrementer:
            def __init__(self, counter: Counter) -> None:
                self.counter = counter

            def increment(self) -> None:
                self.counter.count += 1

        keys = (
            Keys.create()
            .add_key("Counter")
            .for_type(Counter)
            .add_key("CounterIncrementer")
            .for_type(CounterIncrementer)
        )
        container = (
            builder.register_singleton(keys.Counter, inject(Counter, []))
            .register_transient(keys.CounterIncrementer, inject(CounterIncrementer, [keys.Counter]))
            .build()
        )

        incrementer = container.get(keys.CounterIncrementer)
        for _ in range(3):
            incrementer.increment()

        assert container.get(keys.Counter).count == 3

    def test_singleton_returning_none_is_cached(self, builder: ContainerBuilder) -> None:
        calls: list[int] = []

        def build_nothing() -> None:
            calls.append(1)

        key = Key("Nothing")
        container = builder.register_singleton(key, build_nothing, dependencies=[]).build()

        assert container.get(key) is None
        assert container.get(key) is None
        assert calls == [1]

    def test_factory_function_can_be_registered_as_singleton(
        self,
        builder: ContainerBuilder,
    ) -> None:
        url = Key("Url", str)
        client = Key("Client", dict)

        def make_client(base_url: str) -> dict[str, str]:
            return {"base_url": base_url}

        container = (
            builder.register_constant(url, "https://example.com")
            .register_singleton(client, make_client, dependencies=[url])
            .build()
        )

        assert container.get(client) == {"base_url": "https://example.com"}
        assert container.get(client) is container.get(client)


class TestMemberStyleAccess:
    def test_get_accepts_key_name(self, builder: ContainerBuilder) -> None:
        container = builder.register_constant(Key("Answer", int), 42).build()

        assert container.get("Answer") == 42
        assert container["Answer"] == 42
        assert container[Key("Answer", int)] == 42

    def test_contains_checks_registration(self, builder: ContainerBuilder) -> None:
        key = Key("Answer", int)
        container = builder.register_constant(key, 42).build()

        assert key in container
        assert "Answer" in container
        assert "Question" not in container
        assert list(container) == ["Answer"]


class TestContainerState:
    def test_singleton_scope_is_known_before_construction(self) -> None:
        singleton = Key("Singleton", object)
        transient = Key("Transient", object)
        container = (
            ContainerBuilder.create()
            .register_singleton(singleton, object, dependencies=[])
            .register_transient(transient, object, dependencies=[])
            .build()
        )

        assert container.is_singleton("Singleton")
        assert not container.is_singleton("Transient")
        assert not container.is_resolved("Singleton")

        container.get(singleton)

        assert container.is_resolved("Singleton")

    def test_transient_is_never_flagged_resolved(self, builder: ContainerBuilder) -> None:
        key = Key("Transient", object)
        container = builder.register_transient(key, object, dependencies=[]).build()

        container.get(key)

        assert not container.is_resolved("Transient")

    def test_containers_do_not_share_singletons(self, builder: ContainerBuilder) -> None:
        key = Key("Singleton", object)
        builder = builder.register_singleton(key, object, dependencies=[])

        first = builder.build()
        second = Container(builder.finalize())

        assert first.get(key) is not second.get(key)

"""Singleton cycles: break a loop with forward references.

When every member of a cycle is a singleton, the container hands the last
member a forward reference to the first one and binds it once the first one
is built. Constructors may hold the reference but must not read from it.
"""

from __future__ import annotations

from keywire import ContainerBuilder, Keys, depends_on

keys = (
    Keys.create()
    .add_key("ServiceA")
    .for_type(object)
    .add_key("ServiceB")
    .for_type(object)
    .add_key("ServiceC")
    .for_type(object)
)


@depends_on(keys.ServiceC)
class ServiceA:
    def __init__(self, c: ServiceC) -> None:
        self.c = c
        self.num = 2

    def add_from_c(self) -> int:
        return self.num + self.c.num


@depends_on(keys.ServiceA)
class ServiceB:
    def __init__(self, a: ServiceA) -> None:
        self.a = a
        self.num = 3

    def add_from_a(self) -> int:
        return self.num + self.a.num


@depends_on(keys.ServiceB)
class ServiceC:
    def __init__(self, b: ServiceB) -> None:
        self.b = b
        self.num = 4

    def add_from_b(self) -> int:
        return self.num + self.b.num


def main() -> None:
    container = (
        ContainerBuilder.create()
        .register_singleton(keys.ServiceA, ServiceA)
        .register_singleton(keys.ServiceB, ServiceB)
        .register_singleton(keys.ServiceC, ServiceC)
        .build()
    )

    a = container.get(keys.ServiceA)
    b = container.get(keys.ServiceB)
    c = container.get(keys.ServiceC)

    print(f"a_plus_c={a.add_from_c()}")  # => a_plus_c=6
    print(f"b_plus_a={b.add_from_a()}")  # => b_plus_a=5
    print(f"c_plus_b={c.add_from_b()}")  # => c_plus_b=7
    print(f"round_trip={a.c.b.a is a}")  # => round_trip=True


if __name__ == "__main__":
    main()

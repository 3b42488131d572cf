"""Lifetimes: ``TRANSIENT`` and ``SINGLETON``.

Transient templates build a new value on every ``get``. Singletons are built
once per container, even when first built as someone else's dependency.
"""

from __future__ import annotations

from keywire import ContainerBuilder, Keys, inject


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
    .add_key("Scratch")
    .for_type(Counter)
)


def main() -> None:
    container = (
        ContainerBuilder.create()
        .register_singleton(keys.Counter, inject(Counter, []))
        .register_transient(keys.CounterIncrementer, inject(CounterIncrementer, [keys.Counter]))
        .register_transient(keys.Scratch, Counter, dependencies=[])
        .build()
    )

    first = container.get(keys.CounterIncrementer)
    second = container.get(keys.CounterIncrementer)
    print(f"transient_new={first is not second}")  # => transient_new=True

    first.increment()
    second.increment()
    print(f"singleton_shared={first.counter is second.counter}")  # => singleton_shared=True
    print(f"count={container.get(keys.Counter).count}")  # => count=2

    scratch = container.get(keys.Scratch)
    scratch.count += 10
    print(f"scratch_isolated={container.get(keys.Scratch).count}")  # => scratch_isolated=0


if __name__ == "__main__":
    main()

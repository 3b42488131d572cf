"""Quickstart: keys, templates, and one ``get`` call.

Declare typed keys, register a constant and two bound functions, and let the
container resolve the whole chain when you ask for the top-level key.
"""

from __future__ import annotations

from collections.abc import Callable

from keywire import ContainerBuilder, Keys, bind

BiFunc = Callable[[float, float], float]

keys = (
    Keys.create()
    .add_key("Multiply")
    .for_type(BiFunc)
    .add_key("ApplyTaxes")
    .for_type(Callable[[float], float])
    .add_key("TaxRate")
    .for_type(float)
)


def multiply(num1: float, num2: float) -> float:
    return num1 * num2


def apply_bi_func(bi_func: BiFunc, num1: float, num2: float) -> float:
    return bi_func(num1, num2)


def main() -> None:
    container = (
        ContainerBuilder.create()
        .register_constant(keys.TaxRate, 1.06)
        .register_function(keys.Multiply, bind(multiply, []))
        .register_function(keys.ApplyTaxes, bind(apply_bi_func, [keys.Multiply, keys.TaxRate]))
        .build()
    )

    apply_taxes = container.get(keys.ApplyTaxes)
    print(f"taxed_price={apply_taxes(100):.2f}")  # => taxed_price=106.00
    print(f"tax_rate={container['TaxRate']}")  # => tax_rate=1.06


if __name__ == "__main__":
    main()

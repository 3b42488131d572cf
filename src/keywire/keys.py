from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, TypeVar, cast

from keywire.exceptions import DuplicateKeyError, KeywireInvalidRegistrationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Key(Generic[T]):
    """Identify a registrable value and the type it resolves to.

    The name is what the registry is keyed by. ``value_type`` is a witness
    used by type checkers through ``Key[T]`` and kept at runtime for
    diagnostics; it is never checked against resolved values.

    Examples:
        .. code-block:: python

            TaxRate = Key("TaxRate", float)
            container.get(TaxRate)  # typed as float

    """

    name: str
    value_type: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = f"Key name must be a non-empty string, got {self.name!r}."
            raise TypeError(msg)

    def __str__(self) -> str:
        return self.name


class _PendingKey:
    """Second half of ``Keys.add_key(name).for_type(value_type)``."""

    __slots__ = ("_keys", "_name")

    def __init__(self, keys: Keys, name: str) -> None:
        self._keys = keys
        self._name = name

    def for_type(self, value_type: type[T] | Any = None) -> Keys:
        """Finish the key and return a new ``Keys`` that contains it."""
        return self._keys._with_key(Key(self._name, value_type))


class Keys(Mapping[str, Key[Any]]):
    """Immutable, name-indexed set of keys built one key at a time.

    Each ``add_key(...).for_type(...)`` returns a new ``Keys``; the receiver
    is left untouched. Keys are reachable by item and by attribute.

    Examples:
        .. code-block:: python

            keys = (
                Keys.create()
                .add_key("Multiply").for_type(Callable[[float, float], float])
                .add_key("TaxRate").for_type(float)
            )
            keys.TaxRate is keys["TaxRate"]

    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Mapping[str, Key[Any]] | None = None) -> None:
        object.__setattr__(self, "_keys", MappingProxyType(dict(keys or {})))

    @classmethod
    def create(cls) -> Keys:
        return cls()

    def add_key(self, name: str) -> _PendingKey:
        """Start a new key named ``name``.

        Names that collide with ``Keys`` members (``get``, ``items``, ``keys``,
        ``values`` and the like) would be unreachable by attribute access and
        are rejected. Use ``Key(name)`` directly for such names.

        Raises:
            DuplicateKeyError: If ``name`` is already in this set.
            KeywireInvalidRegistrationError: If ``name`` shadows a ``Keys`` member.

        """
        if name in self._keys:
            raise DuplicateKeyError(name)
        if isinstance(name, str) and hasattr(Keys, name):
            msg = f"Key name '{name}' shadows Keys.{name}; use Key('{name}') directly."
            raise KeywireInvalidRegistrationError(msg)
        return _PendingKey(self, name)

    def _with_key(self, key: Key[Any]) -> Keys:
        return Keys({**self._keys, key.name: key})

    def __getattr__(self, name: str) -> Key[Any]:
        keys = cast("Mapping[str, Key[Any]]", object.__getattribute__(self, "_keys"))
        try:
            return keys[name]
        except KeyError:
            msg = f"No key named '{name}'."
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Keys is immutable; use add_key() to extend it."
        raise AttributeError(msg)

    def __getitem__(self, name: str) -> Key[Any]:
        return self._keys[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"Keys({list(self._keys)!r})"


__all__ = ["Key", "Keys"]

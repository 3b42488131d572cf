from __future__ import annotations

import math
import operator
from collections.abc import Callable, Generator, Iterator
from typing import Any, Generic, TypeVar, cast

from keywire.exceptions import KeywireError, UninitializedPropertyAccessError

T = TypeVar("T")

_UNBOUND: Any = object()
_REFERENCE_SLOT = "_keywire_reference"


class ForwardReference(Generic[T]):
    """Stand in for a singleton that is still being built.

    The container creates one reference each time a singleton-only cycle is
    closed and hands out ``proxy`` in place of the unfinished singleton. Once
    the singleton is built the container calls ``bind`` exactly once. From
    then on every operation on ``proxy`` is forwarded to the singleton,
    writes included. Any use of ``proxy`` before that raises
    ``UninitializedPropertyAccessError``.

    Attributes:
        key_name: Name of the singleton this reference stands for.
        holder_name: Name of the key whose factory received ``proxy``.
        proxy: The forwarding handle passed to the holder's factory.

    """

    __slots__ = ("_target", "holder_name", "key_name", "proxy")

    def __init__(self, key_name: str, holder_name: str | None = None) -> None:
        self.key_name = key_name
        self.holder_name = holder_name
        self._target: Any = _UNBOUND
        self.proxy: T = cast("T", _ForwardingProxy(self))

    @property
    def is_bound(self) -> bool:
        return self._target is not _UNBOUND

    @property
    def target(self) -> T:
        """Return the bound singleton.

        Raises:
            UninitializedPropertyAccessError: If the reference is not bound yet.

        """
        if self._target is _UNBOUND:
            raise UninitializedPropertyAccessError(self.key_name)
        return cast("T", self._target)

    def bind(self, target: T) -> None:
        """Bind the reference to the finished singleton.

        Raises:
            KeywireError: If the reference is already bound.

        """
        if self._target is not _UNBOUND:
            msg = f"Forward reference to '{self.key_name}' is already bound."
            raise KeywireError(msg)
        self._target = target

    def __repr__(self) -> str:
        state = "bound" if self.is_bound else "unbound"
        return f"ForwardReference({self.key_name!r}, {state})"


def is_forward_proxy(candidate: object) -> bool:
    """Return whether ``candidate`` is a proxy handed out by a ``ForwardReference``."""
    return type(candidate) is _ForwardingProxy


def reference_of(proxy: object) -> ForwardReference[Any]:
    """Return the ``ForwardReference`` behind a forwarding proxy."""
    return cast("ForwardReference[Any]", object.__getattribute__(proxy, _REFERENCE_SLOT))


def _target_of(proxy: object) -> Any:
    return reference_of(proxy).target


def _forward_binary(operation: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        return operation(_target_of(self), other)

    return forward


def _forward_reflected(operation: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        return operation(other, _target_of(self))

    return forward


def _forward_unary(operation: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def forward(self: Any) -> Any:
        return operation(_target_of(self))

    return forward


class _ForwardingProxy:
    """Forward attribute access and the common protocols to a reference target.

    Implicit special-method lookups bypass ``__getattribute__``, so every
    supported protocol is spelled out here.
    """

    __slots__ = (_REFERENCE_SLOT,)

    def __init__(self, reference: ForwardReference[Any]) -> None:
        object.__setattr__(self, _REFERENCE_SLOT, reference)

    # region Attributes
    def __getattribute__(self, name: str) -> Any:
        return getattr(_target_of(self), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(_target_of(self), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(_target_of(self), name)

    def __dir__(self) -> list[str]:
        return dir(_target_of(self))

    # endregion Attributes

    # region Representation
    def __repr__(self) -> str:
        reference = reference_of(self)
        if reference.is_bound:
            return repr(reference.target)
        return f"<unbound forward reference to '{reference.key_name}'>"

    def __str__(self) -> str:
        return str(_target_of(self))

    def __format__(self, format_spec: str) -> str:
        return format(_target_of(self), format_spec)

    def __bool__(self) -> bool:
        return bool(_target_of(self))

    # endregion Representation

    # region Comparison
    def __eq__(self, other: object) -> bool:
        return cast("bool", _target_of(self) == other)

    def __ne__(self, other: object) -> bool:
        return cast("bool", _target_of(self) != other)

    def __lt__(self, other: Any) -> bool:
        return cast("bool", _target_of(self) < other)

    def __le__(self, other: Any) -> bool:
        return cast("bool", _target_of(self) <= other)

    def __gt__(self, other: Any) -> bool:
        return cast("bool", _target_of(self) > other)

    def __ge__(self, other: Any) -> bool:
        return cast("bool", _target_of(self) >= other)

    def __hash__(self) -> int:
        return hash(_target_of(self))

    # endregion Comparison

    # region Containers
    def __len__(self) -> int:
        return len(_target_of(self))

    def __iter__(self) -> Iterator[Any]:
        return iter(_target_of(self))

    def __reversed__(self) -> Iterator[Any]:
        return reversed(_target_of(self))

    def __contains__(self, item: object) -> bool:
        return item in _target_of(self)

    def __getitem__(self, key: Any) -> Any:
        return _target_of(self)[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        _target_of(self)[key] = value

    def __delitem__(self, key: Any) -> None:
        del _target_of(self)[key]

    # endregion Containers

    # region Arithmetic
    __add__ = _forward_binary(operator.add)
    __sub__ = _forward_binary(operator.sub)
    __mul__ = _forward_binary(operator.mul)
    __matmul__ = _forward_binary(operator.matmul)
    __truediv__ = _forward_binary(operator.truediv)
    __floordiv__ = _forward_binary(operator.floordiv)
    __mod__ = _forward_binary(operator.mod)
    __divmod__ = _forward_binary(divmod)
    __lshift__ = _forward_binary(operator.lshift)
    __rshift__ = _forward_binary(operator.rshift)
    __and__ = _forward_binary(operator.and_)
    __xor__ = _forward_binary(operator.xor)
    __or__ = _forward_binary(operator.or_)

    def __pow__(self, other: Any, modulo: Any = None) -> Any:
        if modulo is None:
            return pow(_target_of(self), other)
        return pow(_target_of(self), other, modulo)

    __radd__ = _forward_reflected(operator.add)
    __rsub__ = _forward_reflected(operator.sub)
    __rmul__ = _forward_reflected(operator.mul)
    __rmatmul__ = _forward_reflected(operator.matmul)
    __rtruediv__ = _forward_reflected(operator.truediv)
    __rfloordiv__ = _forward_reflected(operator.floordiv)
    __rmod__ = _forward_reflected(operator.mod)
    __rdivmod__ = _forward_reflected(divmod)
    __rpow__ = _forward_reflected(pow)
    __rlshift__ = _forward_reflected(operator.lshift)
    __rrshift__ = _forward_reflected(operator.rshift)
    __rand__ = _forward_reflected(operator.and_)
    __rxor__ = _forward_reflected(operator.xor)
    __ror__ = _forward_reflected(operator.or_)

    # In-place operators return the target's result; an immutable target
    # leaves the name rebound to a plain value, not to the proxy.
    __iadd__ = _forward_binary(operator.iadd)
    __isub__ = _forward_binary(operator.isub)
    __imul__ = _forward_binary(operator.imul)
    __imatmul__ = _forward_binary(operator.imatmul)
    __itruediv__ = _forward_binary(operator.itruediv)
    __ifloordiv__ = _forward_binary(operator.ifloordiv)
    __imod__ = _forward_binary(operator.imod)
    __ipow__ = _forward_binary(operator.ipow)
    __ilshift__ = _forward_binary(operator.ilshift)
    __irshift__ = _forward_binary(operator.irshift)
    __iand__ = _forward_binary(operator.iand)
    __ixor__ = _forward_binary(operator.ixor)
    __ior__ = _forward_binary(operator.ior)

    # endregion Arithmetic

    # region Unary and conversions
    __neg__ = _forward_unary(operator.neg)
    __pos__ = _forward_unary(operator.pos)
    __abs__ = _forward_unary(abs)
    __invert__ = _forward_unary(operator.invert)
    __int__ = _forward_unary(int)
    __float__ = _forward_unary(float)
    __complex__ = _forward_unary(complex)
    __index__ = _forward_unary(operator.index)
    __trunc__ = _forward_unary(math.trunc)
    __floor__ = _forward_unary(math.floor)
    __ceil__ = _forward_unary(math.ceil)

    def __round__(self, ndigits: int | None = None) -> Any:
        if ndigits is None:
            return round(_target_of(self))
        return round(_target_of(self), ndigits)

    # endregion Unary and conversions

    # region Callables, context managers and awaitables
    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return _target_of(self)(*args, **kwargs)

    def __enter__(self) -> Any:
        return _target_of(self).__enter__()

    def __exit__(self, *exc_info: object) -> Any:
        return _target_of(self).__exit__(*exc_info)

    def __await__(self) -> Generator[Any, None, Any]:
        return _target_of(self).__await__()  # type: ignore[no-any-return]

    # endregion Callables, context managers and awaitables


__all__ = ["ForwardReference", "is_forward_proxy", "reference_of"]

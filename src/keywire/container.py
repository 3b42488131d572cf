from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, overload

from keywire.exceptions import (
    CircularDependencyError,
    MissingDependencyError,
    MissingInjectableError,
)
from keywire.forward_reference import ForwardReference
from keywire.graph import DependencyGraphNode
from keywire.keys import Key
from keywire.lock_mode import LockMode
from keywire.registry import TemplateRegistry
from keywire.templates import BoundFunction, Constant, InjectedClass, Template

T = TypeVar("T")

logger = logging.getLogger(__name__)
_UNSET: Any = object()


class Container:
    """Resolve registered keys into fully-constructed values.

    The container owns three pieces of state: the singleton cache, the
    forward references still waiting for their singleton, and the set of
    singletons that finished building at least once. Everything else comes
    from the frozen ``TemplateRegistry``.

    Each ``get`` call builds a fresh chain of ``DependencyGraphNode`` objects.
    When a key shows up again in its own ancestry and every node of the loop
    is a singleton, the container hands out a ``ForwardReference`` proxy and
    binds it once the singleton is built. A loop with any transient member
    raises ``CircularDependencyError``.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        *,
        lock_mode: LockMode = LockMode.NONE,
    ) -> None:
        """Initialize a container over a finalized registry.

        Args:
            registry: Templates to resolve from. Usually produced by
                ``ContainerBuilder.finalize``.
            lock_mode: ``LockMode.THREAD`` serializes ``get`` calls through a
                re-entrant lock; ``LockMode.NONE`` assumes single-threaded use.

        Examples:
            .. code-block:: python

                container = Container(builder.finalize())
                shared_container = Container(builder.finalize(), lock_mode=LockMode.THREAD)

        """
        self._registry = registry
        self._lock_mode = lock_mode
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )

        # Membership marks singleton scope; _UNSET marks "not built yet".
        self._singletons: dict[str, Any] = dict.fromkeys(registry.singleton_key_names(), _UNSET)
        self._pending_references: dict[str, list[ForwardReference[Any]]] = {}
        self._resolved_singletons: set[str] = set()
        self._depth = 0

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    @property
    def lock_mode(self) -> LockMode:
        return self._lock_mode

    # region Resolution
    @overload
    def get(self, key: Key[T]) -> T: ...

    @overload
    def get(self, key: str) -> Any: ...

    def get(self, key: Key[Any] | str) -> Any:
        """Resolve ``key`` into a value.

        Dependencies are resolved first, in declaration order. Singleton
        values are cached for the lifetime of the container.

        Args:
            key: Key to resolve, or its name.

        Raises:
            MissingInjectableError: If ``key`` is not registered.
            MissingDependencyError: If a dependency of ``key`` is not registered.
            CircularDependencyError: If ``key`` sits on a cycle with a
                transient member.
            UninitializedPropertyAccessError: If a constructor in a singleton
                cycle used another member before it was built.

        """
        key_name = key.name if isinstance(key, Key) else key
        with self._lock:
            node = DependencyGraphNode(key_name=key_name, is_singleton=self.is_singleton(key_name))
            self._depth += 1
            try:
                return self._resolve(node)
            except Exception:
                # Nested get() calls from factories leave cleanup to the outermost call.
                if self._depth == 1:
                    self._discard_stranded_references()
                raise
            finally:
                self._depth -= 1

    def __getitem__(self, key: Key[T] | str) -> T:
        return self.get(key)  # type: ignore[no-any-return]

    def __contains__(self, key: object) -> bool:
        name = key.name if isinstance(key, Key) else key
        return name in self._registry

    def is_singleton(self, key_name: str) -> bool:
        """Return whether ``key_name`` is registered with singleton scope."""
        return key_name in self._singletons

    def is_resolved(self, key_name: str) -> bool:
        """Return whether the singleton ``key_name`` has finished building."""
        return key_name in self._resolved_singletons

    def _resolve(self, node: DependencyGraphNode) -> Any:
        key_name = node.key_name

        cached = self._singletons.get(key_name, _UNSET)
        if cached is not _UNSET:
            return cached

        if key_name not in self._resolved_singletons and self._closes_singleton_cycle(node):
            return self._issue_forward_reference(node)

        template = self._registry.get(key_name)
        if template is None:
            if node.is_root:
                raise MissingInjectableError(key_name)
            raise MissingDependencyError(node)

        if isinstance(template, Constant):
            return template.resolve()

        resolved_dependencies = [
            self._resolve(node.child(dependency.name, is_singleton=self.is_singleton(dependency.name)))
            for dependency in template.dependencies
        ]
        instance = self._instantiate(template, resolved_dependencies)

        if node.is_singleton:
            self._commit_singleton(key_name, instance)

        return instance

    def _instantiate(self, template: Template, resolved_dependencies: list[Any]) -> Any:
        if isinstance(template, (BoundFunction, InjectedClass)):
            return template.resolve(resolved_dependencies)
        msg = f"Unsupported template {template!r}."
        raise TypeError(msg)

    # endregion Resolution

    # region Cycle Handling
    def _closes_singleton_cycle(self, node: DependencyGraphNode) -> bool:
        """Return whether ``node`` closes a cycle made of singletons only.

        Raises:
            CircularDependencyError: If ``node`` closes a cycle that contains a
                transient member.

        """
        only_singletons = node.is_singleton
        cycle = [node.key_name]
        for ancestor in node.ancestors():
            only_singletons = only_singletons and ancestor.is_singleton
            cycle.append(ancestor.key_name)
            if ancestor.key_name == node.key_name:
                if not only_singletons:
                    cycle.reverse()
                    raise CircularDependencyError(node.key_name, tuple(cycle))
                return True
        return False

    def _issue_forward_reference(self, node: DependencyGraphNode) -> Any:
        holder_name = node.parent.key_name if node.parent is not None else None
        reference: ForwardReference[Any] = ForwardReference(node.key_name, holder_name)
        self._pending_references.setdefault(node.key_name, []).append(reference)
        logger.debug(
            "Issued forward reference to singleton '%s' for '%s'",
            node.key_name,
            holder_name,
        )
        return reference.proxy

    def _commit_singleton(self, key_name: str, instance: Any) -> None:
        self._singletons[key_name] = instance

        references = self._pending_references.pop(key_name, [])
        for reference in references:
            reference.bind(instance)
            self._rewire_holder(reference, instance)
        if references:
            logger.debug(
                "Bound %d forward reference(s) to singleton '%s'",
                len(references),
                key_name,
            )

        self._resolved_singletons.add(key_name)

    def _rewire_holder(self, reference: ForwardReference[Any], instance: Any) -> None:
        """Replace the proxy with ``instance`` in the holder's own attributes.

        Only attributes whose value is the proxy itself are replaced. Proxies
        kept inside containers, on holders without an instance ``__dict__``, or
        on holders whose class defines ``__setattr__`` (frozen dataclasses
        included) stay in place and keep forwarding.
        """
        if reference.holder_name is None:
            return
        holder = self._singletons.get(reference.holder_name, _UNSET)
        if holder is _UNSET:
            return
        if type(holder).__setattr__ is not object.__setattr__:
            return
        attributes = getattr(holder, "__dict__", None)
        if not isinstance(attributes, dict):
            return

        for attribute_name, value in list(attributes.items()):
            if value is reference.proxy:
                attributes[attribute_name] = instance
                logger.debug(
                    "Rewired '%s.%s' to singleton '%s'",
                    reference.holder_name,
                    attribute_name,
                    reference.key_name,
                )

    def _discard_stranded_references(self) -> None:
        """Drop pending references whose holder never reached the cache.

        Called after a failed top-level ``get``. References held by cached
        singletons are kept so they bind when their singleton is built later.
        """
        discarded = 0
        for key_name in list(self._pending_references):
            kept = [
                reference
                for reference in self._pending_references[key_name]
                if reference.holder_name is not None
                and self._singletons.get(reference.holder_name, _UNSET) is not _UNSET
            ]
            discarded += len(self._pending_references[key_name]) - len(kept)
            if kept:
                self._pending_references[key_name] = kept
            else:
                del self._pending_references[key_name]
        if discarded:
            logger.debug("Discarded %d forward reference(s) after a failed resolution", discarded)

    # endregion Cycle Handling

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __repr__(self) -> str:
        return f"Container(keys={list(self._registry)!r}, lock_mode={self._lock_mode.name})"


__all__ = ["Container"]

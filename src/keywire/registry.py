from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from keywire.exceptions import DuplicateKeyError, KeywireInvalidRegistrationError
from keywire.integrations.pydantic_settings import is_pydantic_settings_subclass
from keywire.keys import Key
from keywire.lock_mode import LockMode
from keywire.markers import dependencies_of
from keywire.templates import (
    TEMPLATE_TYPES,
    BoundFunction,
    Constant,
    InjectedClass,
    Lifetime,
    Template,
    is_singleton_template,
)

if TYPE_CHECKING:
    from keywire.container import Container

T = TypeVar("T")


class TemplateRegistry(Mapping[str, Template]):
    """Read-only mapping from key name to template.

    Produced by ``ContainerBuilder.finalize``. Key names are unique and the
    mapping cannot change once created.
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[str, Template] | None = None) -> None:
        self._templates: Mapping[str, Template] = MappingProxyType(dict(templates or {}))

    def __getitem__(self, key_name: str) -> Template:
        return self._templates[key_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def singleton_key_names(self) -> list[str]:
        """Return names of every singleton-scoped template, in registration order."""
        return [name for name, template in self._templates.items() if is_singleton_template(template)]

    def __repr__(self) -> str:
        return f"TemplateRegistry({list(self._templates)!r})"


class ContainerBuilder:
    """Assemble a template registry one registration at a time.

    Every ``register_*`` method returns a new builder and leaves the receiver
    unchanged, so partially assembled builders can be shared and extended
    independently. Key names must be unique across all template kinds.

    Examples:
        .. code-block:: python

            container = (
                ContainerBuilder.create()
                .register_constant(keys.TaxRate, 1.06)
                .register_function(keys.Multiply, bind(multiply, []))
                .register_function(keys.ApplyTaxes, bind(apply, [keys.Multiply, keys.TaxRate]))
                .build()
            )
            container.get(keys.ApplyTaxes)(100)  # 106.0

    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[str, Template] | None = None) -> None:
        self._templates: dict[str, Template] = dict(templates or {})

    @classmethod
    def create(cls) -> ContainerBuilder:
        return cls()

    @property
    def templates(self) -> Mapping[str, Template]:
        """Templates registered so far, keyed by key name."""
        return MappingProxyType(self._templates)

    # region Registration Methods
    def register_constant(self, key: Key[T], value: T) -> ContainerBuilder:
        """Register a fixed value. Constants are returned as is and never cached.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.

        """
        return self.register_template(key, Constant(value))

    def register_function(
        self,
        key: Key[Any],
        function: Callable[..., Any],
        dependencies: Sequence[Key[Any]] | None = None,
    ) -> ContainerBuilder:
        """Register a function that resolves partially applied to its dependencies.

        Args:
            key: Key to register under.
            function: Function to bind. Usually the result of ``bind``.
            dependencies: Keys for the leading parameters. Read from the
                metadata attached by ``bind``/``depends_on`` when omitted.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.
            KeywireInvalidRegistrationError: If ``function`` is not callable or
                no dependency keys are available.

        """
        self._validate_callable(function, method_name="register_function")
        return self.register_template(
            key,
            BoundFunction(function, self._resolve_dependencies(function, dependencies)),
        )

    def register_transient(
        self,
        key: Key[T],
        factory: Callable[..., T],
        dependencies: Sequence[Key[Any]] | None = None,
    ) -> ContainerBuilder:
        """Register a construction routine that builds a new value on every resolution.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.
            KeywireInvalidRegistrationError: If ``factory`` is not callable or
                no dependency keys are available.

        """
        return self._register_injected_class(
            key,
            factory,
            dependencies,
            lifetime=Lifetime.TRANSIENT,
            method_name="register_transient",
        )

    def register_singleton(
        self,
        key: Key[T],
        factory: Callable[..., T],
        dependencies: Sequence[Key[Any]] | None = None,
    ) -> ContainerBuilder:
        """Register a construction routine whose value is built once per container.

        Singletons are the only templates allowed to close a dependency cycle.
        Inside a cycle one member receives a forward reference. Once the cycle
        is built, instance attributes holding that reference are replaced with
        the real singleton directly in ``__dict__``. Classes that define
        ``__setattr__``, frozen dataclasses included, are left alone and keep
        the forwarding reference.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.
            KeywireInvalidRegistrationError: If ``factory`` is not callable or
                no dependency keys are available.

        """
        return self._register_injected_class(
            key,
            factory,
            dependencies,
            lifetime=Lifetime.SINGLETON,
            method_name="register_singleton",
        )

    def register_settings(self, key: Key[T], settings_type: type[T]) -> ContainerBuilder:
        """Register a ``pydantic_settings.BaseSettings`` model as a singleton.

        The model is instantiated without arguments on first resolution, so it
        reads its values from the environment the way pydantic-settings does.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.
            KeywireInvalidRegistrationError: If ``settings_type`` is not a
                settings model or pydantic-settings is not installed.

        """
        if not is_pydantic_settings_subclass(settings_type):
            msg = (
                f"register_settings() expects a pydantic_settings.BaseSettings subclass, "
                f"got {settings_type!r}."
            )
            raise KeywireInvalidRegistrationError(msg)
        return self.register_singleton(key, settings_type, dependencies=())

    def register_class(
        self,
        key: Key[T],
        factory: Callable[..., T],
        dependencies: Sequence[Key[Any]] | None = None,
    ) -> ContainerBuilder:
        """Alias of ``register_transient``."""
        return self.register_transient(key, factory, dependencies)

    def register_template(self, key: Key[Any], template: Template) -> ContainerBuilder:
        """Register a prebuilt template under ``key``.

        Raises:
            DuplicateKeyError: If ``key.name`` is already registered.
            KeywireInvalidRegistrationError: If ``key`` or ``template`` has the
                wrong type.

        """
        if not isinstance(key, Key):
            msg = f"Registration key must be a Key, got {key!r}."
            raise KeywireInvalidRegistrationError(msg)
        if not isinstance(template, TEMPLATE_TYPES):
            msg = f"Unsupported template {template!r} for key '{key.name}'."
            raise KeywireInvalidRegistrationError(msg)
        if key.name in self._templates:
            raise DuplicateKeyError(key.name)

        return ContainerBuilder({**self._templates, key.name: template})

    # endregion Registration Methods

    def finalize(self) -> TemplateRegistry:
        """Freeze the registrations into a ``TemplateRegistry``."""
        return TemplateRegistry(self._templates)

    def build(self, *, lock_mode: LockMode = LockMode.NONE) -> Container:
        """Finalize the registrations and create a container over them.

        Args:
            lock_mode: Locking strategy of the container, see ``LockMode``.

        """
        from keywire.container import Container

        return Container(self.finalize(), lock_mode=lock_mode)

    def _register_injected_class(
        self,
        key: Key[Any],
        factory: Callable[..., Any],
        dependencies: Sequence[Key[Any]] | None,
        *,
        lifetime: Lifetime,
        method_name: str,
    ) -> ContainerBuilder:
        self._validate_callable(factory, method_name=method_name)
        return self.register_template(
            key,
            InjectedClass(
                factory=factory,
                dependencies=self._resolve_dependencies(factory, dependencies),
                lifetime=lifetime,
            ),
        )

    def _resolve_dependencies(
        self,
        target: Callable[..., Any],
        dependencies: Sequence[Key[Any]] | None,
    ) -> tuple[Key[Any], ...]:
        if dependencies is None:
            return dependencies_of(target)
        resolved = tuple(dependencies)
        for dependency in resolved:
            if not isinstance(dependency, Key):
                msg = f"Dependency {dependency!r} is not a Key."
                raise KeywireInvalidRegistrationError(msg)
        return resolved

    def _validate_callable(self, target: object, *, method_name: str) -> None:
        if not callable(target):
            msg = f"{method_name}() expects a callable, got {target!r}."
            raise KeywireInvalidRegistrationError(msg)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, key: object) -> bool:
        name = key.name if isinstance(key, Key) else key
        return name in self._templates


__all__ = ["ContainerBuilder", "TemplateRegistry"]

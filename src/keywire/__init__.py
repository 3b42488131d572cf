from keywire.container import Container
from keywire.exceptions import (
    CircularDependencyError,
    DuplicateKeyError,
    KeywireError,
    KeywireInvalidRegistrationError,
    MissingDependencyError,
    MissingInjectableError,
    UninitializedPropertyAccessError,
)
from keywire.forward_reference import ForwardReference
from keywire.graph import DependencyGraphNode, render_dependency_path
from keywire.keys import Key, Keys
from keywire.lock_mode import LockMode
from keywire.markers import bind, dependencies_of, depends_on, inject
from keywire.registry import ContainerBuilder, TemplateRegistry
from keywire.templates import BoundFunction, Constant, InjectedClass, Lifetime, Template

__all__ = [
    "BoundFunction",
    "CircularDependencyError",
    "Constant",
    "Container",
    "ContainerBuilder",
    "DependencyGraphNode",
    "DuplicateKeyError",
    "ForwardReference",
    "InjectedClass",
    "Key",
    "Keys",
    "KeywireError",
    "KeywireInvalidRegistrationError",
    "Lifetime",
    "LockMode",
    "MissingDependencyError",
    "MissingInjectableError",
    "Template",
    "TemplateRegistry",
    "UninitializedPropertyAccessError",
    "bind",
    "dependencies_of",
    "depends_on",
    "inject",
    "render_dependency_path",
]

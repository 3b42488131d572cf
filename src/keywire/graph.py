from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

DEPENDENCY_PATH_SEPARATOR = "-->"


@dataclass(frozen=True, slots=True)
class DependencyGraphNode:
    """Record one step of a single ``Container.get`` call.

    Nodes are created fresh for every resolution call and linked to the node
    of the template that requested them. The chain is used for cycle
    detection and for rendering the path in ``MissingDependencyError``.
    """

    key_name: str
    """Name of the key being resolved at this step."""
    is_singleton: bool
    """Whether the key was singleton-scoped when the node was created."""
    parent: DependencyGraphNode | None = None
    """Node of the dependent template, or ``None`` for the root request."""

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def child(self, key_name: str, *, is_singleton: bool) -> DependencyGraphNode:
        """Create a node for a dependency of this node's template."""
        return DependencyGraphNode(key_name=key_name, is_singleton=is_singleton, parent=self)

    def ancestors(self) -> Iterator[DependencyGraphNode]:
        """Yield parent nodes from the closest one up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def path(self) -> tuple[str, ...]:
        """Return key names from the root down to this node."""
        names = [self.key_name, *(node.key_name for node in self.ancestors())]
        names.reverse()
        return tuple(names)


def render_dependency_path(node: DependencyGraphNode) -> str:
    """Render the chain ending at ``node`` as ``Root-->...-->Leaf``.

    Args:
        node: Last node of the chain.

    """
    return DEPENDENCY_PATH_SEPARATOR.join(node.path())


__all__ = ["DEPENDENCY_PATH_SEPARATOR", "DependencyGraphNode", "render_dependency_path"]

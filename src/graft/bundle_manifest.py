"""Utilities for constructing bundle build manifests.

A :class:`BundleManifest` is the blueprint for a bundle: the producers for
every key and an order in which to invoke them such that each key's
dependencies are built before it.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Iterable, Iterator

from graft.domain import BindingKey
from graft.errors import DependencyError
from graft.provider_set import ProviderSet, ResolvedBinding

__all__ = ["BundleManifest", "BundleManifestBuilder"]


@dataclass(frozen=True)
class BundleManifest:
    """Description of how to build a :class:`~graft.bundle.Bundle`."""

    resolved_bindings: dict[BindingKey, ResolvedBinding]
    """Producers keyed by the key they produce."""

    build_order: list[BindingKey]
    """Ordered list of keys to build."""


class _DependencyGraph:
    """
    Internal helper to represent and traverse a directed acyclic graph of binding dependencies.

    Each node is a binding key, and each edge points at a key it depends on.
    """

    def __init__(self):
        self._dependencies: dict[BindingKey, set[BindingKey]] = defaultdict(set)

    def add_dependencies(self, dependee: BindingKey, dependencies: Iterable[BindingKey]):
        self._dependencies[dependee].update(dependencies)

    def traverse(self) -> Iterator[BindingKey]:
        """
        Perform a topological traversal of the dependency graph.

        Yields:
            Keys in an order where all dependencies of each key
            are yielded before the key itself.

        Raises:
            DependencyError: If any cycles remain.
        """
        ready = deque(
            dependee
            for dependee, dependencies in self._dependencies.items()
            if not dependencies
        )

        while ready:
            next_key = ready.popleft()
            yield next_key
            self._remove_dependency(next_key, ready)

        if self._dependencies:
            raise DependencyError(
                f"Unresolvable dependencies: {[str(key) for key in self._dependencies]}"
            )

    def _remove_dependency(self, resolved: BindingKey, ready: deque):
        del self._dependencies[resolved]

        for dependee, dependencies in self._dependencies.items():
            if resolved in dependencies:
                dependencies.discard(resolved)
                if not dependencies:
                    ready.append(dependee)


class BundleManifestBuilder:
    """Resolve a :class:`ProviderSet` into a :class:`BundleManifest`."""

    def build(self, provider_set: ProviderSet) -> BundleManifest:
        """Determine the order in which the provider set's keys must be built.

        Args:
            provider_set: Validated set of bindings to resolve.

        Returns:
            A BundleManifest describing how to build the bundle.

        Raises:
            DependencyError: If the bindings depend on each other cyclically.
        """
        graph = _DependencyGraph()
        for key, resolved in provider_set.bindings_by_key.items():
            graph.add_dependencies(key, (dependency.key for dependency in resolved.dependencies))

        return BundleManifest(provider_set.bindings_by_key, list(graph.traverse()))

"""Helpers for collecting bindings into a validated set of providers.

Every key in a :class:`ProviderSet` has exactly one :class:`ResolvedBinding`:
either a single plain binding, or all the contributions made to a set key.
Contributions to the same element type from any number of modules are merged
here, so the translator never has to.
"""

from collections import defaultdict
from dataclasses import dataclass

from graft.domain import BindingKey, BindingSpec, Dependency
from graft.errors import DependencyError

__all__ = ["ResolvedBinding", "ProviderSet", "make_provider_set"]


@dataclass(frozen=True)
class ResolvedBinding:
    """The producers for one key.

    Attributes:
        key: The key produced; ``frozenset[T]`` for a set.
        bindings: The plain binding, or every contribution to the set.
        is_set: Whether the value is assembled from contributions.
    """

    key: BindingKey
    bindings: tuple[BindingSpec, ...]
    is_set: bool = False

    @property
    def dependencies(self) -> list[Dependency]:
        return [
            dependency
            for binding in self.bindings
            for dependency in binding.producer.dependencies
        ]


@dataclass(frozen=True)
class ProviderSet:
    """
    A resolved set of bindings, indexed by the key each one produces.

    Attributes:
        bindings_by_key: Mapping from keys to the bindings producing them.
    """

    bindings_by_key: dict[BindingKey, ResolvedBinding]


def make_provider_set(bindings: list[BindingSpec]) -> ProviderSet:
    """
    Constructs a ProviderSet from a list of BindingSpecs.

    Validates that:
      - Each plain binding has a unique key.
      - No key is both bound directly and assembled from set contributions.
      - Every dependency is produced by some binding in the set.

    Raises:
        DependencyError: If any of the above does not hold.

    Args:
        bindings: The bindings to include.

    Returns:
        A ProviderSet with set contributions merged under their set keys.
    """
    plain = _bindings_by_unique_key([b for b in bindings if not b.contributes_to_set])
    merged = _merged_set_contributions([b for b in bindings if b.contributes_to_set])

    conflicts = [key for key in merged if key in plain]
    if conflicts:
        raise DependencyError(
            f"Keys {[str(key) for key in conflicts]} are bound directly "
            "and also receive set contributions"
        )

    bindings_by_key = {**plain, **merged}
    _check_satisfied(bindings_by_key)
    return ProviderSet(bindings_by_key)


def _bindings_by_unique_key(bindings: list[BindingSpec]) -> dict[BindingKey, ResolvedBinding]:
    bindings_by_key: dict[BindingKey, ResolvedBinding] = {}

    for binding in bindings:
        if binding.key in bindings_by_key:
            existing = bindings_by_key[binding.key].bindings[0]
            raise DependencyError(
                f"Duplicate bindings for key '{binding.key}' "
                f"from {existing.provenance} and {binding.provenance}"
            )
        bindings_by_key[binding.key] = ResolvedBinding(binding.key, (binding,))

    return bindings_by_key


def _merged_set_contributions(
    contributions: list[BindingSpec],
) -> dict[BindingKey, ResolvedBinding]:
    by_set_key: dict[BindingKey, list[BindingSpec]] = defaultdict(list)
    for contribution in contributions:
        by_set_key[contribution.resolved_key].append(contribution)

    return {
        set_key: ResolvedBinding(set_key, tuple(contributed), is_set=True)
        for set_key, contributed in by_set_key.items()
    }


def _check_satisfied(bindings_by_key: dict[BindingKey, ResolvedBinding]):
    unsatisfied = [
        f"{dependency.key} (required by {binding.provenance})"
        for resolved in bindings_by_key.values()
        for binding in resolved.bindings
        for dependency in binding.producer.dependencies
        if dependency.key not in bindings_by_key
    ]
    if unsatisfied:
        raise DependencyError(
            f"Provider set has unsatisfied dependencies: {', '.join(unsatisfied)}"
        )

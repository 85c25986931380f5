"""
Materialisation of a bundle manifest into a bundle of values.

Keys are built in manifest order. A plain key's value is whatever its producer
returns; a set key's value is the frozenset of every contribution's value, so
contributions must be hashable.
Producers are only invoked here, so a provider that cannot run (such as an
instance method of a module passed as a class) fails at this point.
"""

from typing import Any

from graft.bundle_manifest import BundleManifest
from graft.domain import BindingKey, BindingSpec, display_name
from graft.errors import ProvisionError
from graft.provider_set import ResolvedBinding

__all__ = ["Bundle", "BundleBuilder"]


class Bundle:
    """
    A container of materialised values, resolved from a set of bindings.

    Values can be retrieved by :class:`~graft.domain.BindingKey` or by any
    annotation a key can be built from, such as ``Database``,
    ``Annotated[str, "url"]`` or ``set[Plugin]``.
    """

    def __init__(self, components: dict[BindingKey, Any]):
        self.components = components

    def __getitem__(self, key: Any) -> Any:
        return self.components[BindingKey.of(key)]

    def __contains__(self, key: Any) -> bool:
        return BindingKey.of(key) in self.components


class BundleBuilder:
    """Instantiate values from a :class:`BundleManifest`."""

    def __init__(self, manifest: BundleManifest):
        self._manifest = manifest

    def build(self) -> Bundle:
        """Materialise every key defined by the manifest.

        Raises:
            ProvisionError: If a producer cannot be invoked, or contributes an
                unhashable value to a set.
        """
        built: dict[BindingKey, Any] = {}

        for key in self._manifest.build_order:
            resolved = self._manifest.resolved_bindings[key]
            if resolved.is_set:
                built[key] = _assemble_set(resolved, built)
            else:
                built[key] = _invoke(resolved.bindings[0], built)

        return Bundle(built)


def _invoke(binding: BindingSpec, built: dict[BindingKey, Any]) -> Any:
    producer = binding.producer
    return producer(
        **{dependency.parameter_name: built[dependency.key] for dependency in producer.dependencies}
    )


def _assemble_set(resolved: ResolvedBinding, built: dict[BindingKey, Any]) -> frozenset:
    values = []
    for binding in resolved.bindings:
        value = _invoke(binding, built)
        try:
            hash(value)
        except TypeError as e:
            raise ProvisionError(
                f"{binding.provenance} contributed an unhashable "
                f"{display_name(type(value))} to {resolved.key}. "
                "Set elements must be hashable."
            ) from e
        values.append(value)
    return frozenset(values)

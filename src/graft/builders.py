"""High level entry points for constructing bundles from a registry."""

import logging

from graft.bundle import Bundle, BundleBuilder
from graft.bundle_manifest import BundleManifest, BundleManifestBuilder
from graft.provider_set import make_provider_set
from graft.registry import BindingRegistry

__all__ = ["make_manifest", "make_bundle"]

logger = logging.getLogger(__name__)


def make_manifest(registry: BindingRegistry) -> BundleManifest:
    """Create a :class:`BundleManifest` for the given registry.

    Args:
        registry: The registry holding installed bindings and configuration problems.

    Returns:
        The resolved :class:`BundleManifest` describing build order.

    Raises:
        ConfigurationFailed: If any configuration problem was reported to the registry.
        DependencyError: If bindings are duplicated, missing, or cyclic.
    """
    registry.errors.raise_if_failed()
    provider_set = make_provider_set(registry.registered_bindings())
    return BundleManifestBuilder().build(provider_set)


def make_bundle(registry: BindingRegistry) -> Bundle:
    """Construct and return a fully materialised :class:`Bundle`.

    Bindings are selected from the registry, resolved into a manifest and then
    instantiated in dependency order.

    Raises:
        ConfigurationFailed: If any configuration problem was reported to the registry.
        DependencyError: If bindings are duplicated, missing, or cyclic.
        ProvisionError: If a provider cannot be invoked.
    """
    manifest = make_manifest(registry)
    logger.info("Building bundle of %d key(s)", len(manifest.build_order))
    return BundleBuilder(manifest).build()

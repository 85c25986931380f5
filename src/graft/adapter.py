"""Entry points adapting Dagger-style modules to the host container.

Example:
    >>> registry = BindingRegistry()
    >>> registry.install(adapt(DatabaseModule("sqlite://"), MetricsModule))
    >>> bundle = make_bundle(registry)
    >>> bundle[Database]

Every module is validated and translated before anything is reported, so a
failed configuration lists every problem from every module at once.
"""

import logging
from typing import Any, Iterable

from graft.candidates import as_candidate
from graft.descriptors import describe_type
from graft.domain import BindingSpec, ProblemKind
from graft.sink import ConfigurationSink, ErrorSink
from graft.translation import ProviderMethodTranslator
from graft.validation import ModuleValidator

__all__ = ["adapt", "AdaptedModules", "configure_modules"]

logger = logging.getLogger(__name__)


def configure_modules(module_objects: Iterable[Any], sink: ConfigurationSink) -> None:
    """Run one configuration pass over ``module_objects``, reporting to ``sink``.

    Each object may be a module class or a module instance. Modules are
    processed in the order given. A module that is not marked as a module, or
    that declares sub-modules, contributes its problems but no bindings; a
    method with an unsupported directive is skipped without affecting the
    module's other methods.

    Args:
        module_objects: Module classes and/or instances.
        sink: Receives every problem, then every binding.
    """
    validator = ModuleValidator()
    translator = ProviderMethodTranslator()
    errors = ErrorSink()
    bindings: list[BindingSpec] = []

    for module_object in module_objects:
        candidate = as_candidate(module_object)
        descriptor = describe_type(candidate.module_type)

        problems = validator.validate(candidate, descriptor)
        errors.extend(problems)
        if any(problem.kind is ProblemKind.STRUCTURAL for problem in problems):
            continue

        translation = translator.translate(candidate, descriptor)
        errors.extend(translation.problems)
        bindings.extend(translation.bindings)

    for problem in errors:
        sink.add_error(problem.message, problem.source)

    for binding in bindings:
        if binding.contributes_to_set:
            sink.install_set_contribution(binding.key, binding.producer, binding.provenance)
        else:
            sink.install_binding(binding.key, binding.producer, binding.provenance)

    logger.info(
        "Configured adapted modules: %d binding(s), %d error(s)", len(bindings), len(errors)
    )


class AdaptedModules:
    """A host module wrapping Dagger-style modules; see :func:`adapt`."""

    def __init__(self, module_objects: Iterable[Any]):
        self._module_objects = tuple(module_objects)

    @property
    def module_objects(self) -> tuple[Any, ...]:
        return self._module_objects

    def configure(self, sink: ConfigurationSink):
        configure_modules(self._module_objects, sink)

    def __repr__(self) -> str:
        return f"AdaptedModules(modules={list(self._module_objects)!r})"


def adapt(*module_objects: Any) -> AdaptedModules:
    """Wrap Dagger-style modules for installation in a host registry.

    For modules whose providers are all static or class methods, pass the class.
    Modules with instance-method providers must be passed as instances; passing
    the class instead fails when the host first asks for the binding.

    Sub-module ``includes`` are not followed; list every module explicitly.
    """
    return AdaptedModules(module_objects)

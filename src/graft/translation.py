"""Translation of provider methods into host bindings."""

import inspect
import logging
from dataclasses import dataclass
from types import MethodType
from typing import Callable, Optional

from graft.candidates import ModuleCandidate
from graft.descriptors import EMPTY, MethodDescriptor, MethodKind, TypeDescriptor
from graft.domain import (
    BindingKey,
    BindingSpec,
    ConfigurationProblem,
    Dependency,
    ProblemKind,
    Provenance,
    ProviderMethod,
    canonical_name,
)
from graft.errors import ProvisionError

__all__ = ["Translation", "ProviderMethodTranslator"]

logger = logging.getLogger(__name__)

_TRANSLATED_KINDS = (MethodKind.PROVIDER, MethodKind.SET_CONTRIBUTOR)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class Translation:
    """The bindings translated from one candidate, and the methods that could not be."""

    bindings: tuple[BindingSpec, ...] = ()
    problems: tuple[ConfigurationProblem, ...] = ()


class ProviderMethodTranslator:
    """Turns the provider methods of a module into :class:`BindingSpec` objects.

    Only the most-derived definition of each method is considered; a provider
    overridden by a subclass is translated from the subclass's definition. A
    method carrying an unsupported directive is never translated, but other
    methods of the same module still are.
    """

    def translate(self, candidate: ModuleCandidate, descriptor: TypeDescriptor) -> Translation:
        """Translate every provider method of ``candidate``.

        Args:
            candidate: The module candidate, supplying the instance if there is one.
            descriptor: The descriptor of ``candidate.module_type``.

        Returns:
            One binding per valid provider method, in declaration order, and one
            problem per provider method whose signature cannot be translated.
        """
        bindings = []
        problems = []

        for method in descriptor.effective_methods:
            if method.kind not in _TRANSLATED_KINDS:
                continue

            problem = _signature_problem(method)
            if problem is not None:
                problems.append(ConfigurationProblem(problem, method, ProblemKind.INVALID_PROVIDER))
                continue

            binding = self._binding_for(candidate, method)
            logger.debug("Translated %s into a binding for %s", binding.provenance, binding.resolved_key)
            bindings.append(binding)

        return Translation(tuple(bindings), tuple(problems))

    def _binding_for(self, candidate: ModuleCandidate, method: MethodDescriptor) -> BindingSpec:
        dependencies = tuple(
            Dependency(parameter.name, BindingKey.of(parameter.annotation))
            for parameter in method.parameters
        )
        return BindingSpec(
            BindingKey.of(method.return_annotation),
            ProviderMethod(_bind(candidate, method), dependencies),
            Provenance(candidate.module_type, method.name),
            method.kind is MethodKind.SET_CONTRIBUTOR,
        )


def _signature_problem(method: MethodDescriptor) -> Optional[str]:
    if method.introspection_error is not None:
        return f"Unable to resolve the annotations of {method}: {method.introspection_error}"
    if method.return_annotation is EMPTY:
        return f"{method} must declare the type it provides as a return annotation"
    if method.return_annotation is type(None):
        return f"{method} must provide a value, but is annotated as returning None"
    for parameter in method.parameters:
        if parameter.kind in _VARIADIC:
            return f"Parameter <{parameter.name}> of {method} is variadic"
        if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
            return f"Parameter <{parameter.name}> of {method} is positional-only"
        if parameter.annotation is EMPTY:
            return f"Parameter <{parameter.name}> of {method} is not annotated"
    return None


def _bind(candidate: ModuleCandidate, method: MethodDescriptor) -> Callable:
    if method.binding == "static":
        return method.function
    if method.binding == "class":
        return MethodType(method.function, candidate.module_type)
    if candidate.instance is None:
        return _missing_instance(candidate.module_type, method)
    return MethodType(method.function, candidate.instance)


def _missing_instance(module_type: type, method: MethodDescriptor) -> Callable:
    def provide(**_dependencies):
        raise ProvisionError(
            f"{method} is an instance method, but {canonical_name(module_type)} was passed "
            "as a class. Make the method static or pass an instance of the module instead."
        )

    return provide

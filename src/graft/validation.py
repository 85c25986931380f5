"""Checks that a candidate is a module graft can translate."""

from graft.candidates import ModuleCandidate
from graft.dagger import FOREIGN_NAMESPACE
from graft.descriptors import TypeDescriptor
from graft.domain import ConfigurationProblem, ProblemKind, canonical_name

__all__ = ["ModuleValidator"]


class ModuleValidator:
    """Validates one module candidate against its type descriptor.

    Checks run in a fixed order: the module marker, then sub-module
    declarations, then every method's directives in declaration order. A
    class without the marker is not a module, so nothing else is checked.

    Stateless; one instance can validate any number of candidates.
    """

    def validate(
        self, candidate: ModuleCandidate, descriptor: TypeDescriptor
    ) -> list[ConfigurationProblem]:
        """Return the problems found with ``candidate``, possibly none.

        Args:
            candidate: The module candidate.
            descriptor: The descriptor of ``candidate.module_type``.

        Returns:
            Problems in the order the checks found them.
        """
        if not descriptor.module_info.marked:
            return [self._not_a_module(candidate)]

        problems = self._check_no_sub_modules(descriptor)
        problems.extend(self._check_unsupported_directives(descriptor))
        return problems

    def _not_a_module(self, candidate: ModuleCandidate) -> ConfigurationProblem:
        module_type = candidate.module_type
        return ConfigurationProblem(
            f"{canonical_name(module_type)} must be decorated with @{FOREIGN_NAMESPACE}.module",
            module_type,
            ProblemKind.STRUCTURAL,
        )

    def _check_no_sub_modules(self, descriptor: TypeDescriptor) -> list[ConfigurationProblem]:
        sub_modules = descriptor.module_info.sub_modules
        if not sub_modules:
            return []

        names = ", ".join(canonical_name(sub_module) for sub_module in sub_modules)
        return [
            ConfigurationProblem(
                "Sub-modules cannot be configured for modules used with graft. "
                f"{canonical_name(descriptor.type)} specifies: [{names}]",
                descriptor.type,
                ProblemKind.STRUCTURAL,
            )
        ]

    def _check_unsupported_directives(
        self, descriptor: TypeDescriptor
    ) -> list[ConfigurationProblem]:
        return [
            ConfigurationProblem(
                f"{method} is decorated with {directive} which is not supported by graft",
                method,
                ProblemKind.UNSUPPORTED_DIRECTIVE,
            )
            for method in descriptor.methods
            for directive in method.unsupported_directives
        ]

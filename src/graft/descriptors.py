"""Type descriptors: the introspected shape of a module class.

A :class:`TypeDescriptor` is derived once per candidate and is the only view
of the module class the validator and translator see. Deriving one never
raises for a class: annotations that cannot be resolved are recorded on the
affected :class:`MethodDescriptor` and reported later, if the method matters.
"""

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, get_type_hints

from graft.dagger import (
    FOREIGN_NAMESPACE,
    SUPPORTED_DIRECTIVES,
    Directive,
    directives_of,
    into_set,
    module_marker_of,
    provides,
)
from graft.domain import display_name

__all__ = [
    "EMPTY",
    "MethodKind",
    "Parameter",
    "MethodDescriptor",
    "ModuleAnnotationInfo",
    "TypeDescriptor",
    "describe_type",
]

EMPTY = inspect.Parameter.empty


class MethodKind(Enum):
    PLAIN = "plain"
    PROVIDER = "provider"
    SET_CONTRIBUTOR = "set contributor"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: Any
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD


@dataclass(frozen=True)
class MethodDescriptor:
    """One method declared on a module class or one of its ancestors.

    Attributes:
        declaring_type: The class whose body defines the method.
        name: The attribute name.
        directives: Directives attached to the method, outermost first.
        binding: ``"instance"``, ``"class"`` or ``"static"``.
        return_annotation: The resolved return annotation, or ``EMPTY``.
        parameters: Parameters excluding ``self``/``cls``.
        introspection_error: Why the annotations could not be resolved, if they couldn't.
        function: The underlying function, unwrapped from staticmethod/classmethod.
    """

    declaring_type: type
    name: str
    directives: tuple[Directive, ...]
    binding: str
    return_annotation: Any
    parameters: tuple[Parameter, ...]
    introspection_error: Optional[str] = None
    function: Any = field(default=None, compare=False, repr=False)

    @property
    def unsupported_directives(self) -> tuple[Directive, ...]:
        return tuple(
            directive
            for directive in self.directives
            if directive.namespace == FOREIGN_NAMESPACE
            and directive not in SUPPORTED_DIRECTIVES
        )

    @property
    def kind(self) -> MethodKind:
        if self.unsupported_directives:
            return MethodKind.UNSUPPORTED
        if provides not in self.directives:
            return MethodKind.PLAIN
        if into_set in self.directives:
            return MethodKind.SET_CONTRIBUTOR
        return MethodKind.PROVIDER

    @property
    def requires_instance(self) -> bool:
        return self.binding == "instance"

    def __str__(self) -> str:
        return f"{display_name(self.declaring_type)}.{self.name}()"


@dataclass(frozen=True)
class ModuleAnnotationInfo:
    """Whether a class is marked as a module, and the sub-modules it declares."""

    marked: bool
    sub_modules: tuple[type, ...] = ()


@dataclass(frozen=True)
class TypeDescriptor:
    """The methods and module metadata of one class.

    Attributes:
        type: The described class.
        module_info: The class's own module marker.
        methods: Every method declared on the class and its ancestors, most-derived
            class first and in definition order within each class.
    """

    type: type
    module_info: ModuleAnnotationInfo
    methods: tuple[MethodDescriptor, ...]

    @property
    def effective_methods(self) -> tuple[MethodDescriptor, ...]:
        """The most-derived definition of each method name."""
        seen: set[str] = set()
        effective = []
        for method in self.methods:
            if method.name not in seen:
                seen.add(method.name)
                effective.append(method)
        return tuple(effective)


def describe_type(cls: type) -> TypeDescriptor:
    """Introspect a class into a :class:`TypeDescriptor`.

    ``object`` contributes no methods. A class reachable twice through multiple
    inheritance is visited once.
    """
    methods = tuple(
        _describe_method(klass, name, member)
        for klass in inspect.getmro(cls)
        if klass is not object
        for name, member in vars(klass).items()
        if _is_method(member)
    )
    return TypeDescriptor(cls, _module_info(cls), methods)


def _module_info(cls: type) -> ModuleAnnotationInfo:
    marker = module_marker_of(cls)
    if marker is None:
        return ModuleAnnotationInfo(False)
    return ModuleAnnotationInfo(True, marker.includes + marker.subcomponents)


def _is_method(member: Any) -> bool:
    if isinstance(member, (staticmethod, classmethod)) or inspect.isfunction(member):
        return True
    # Callable wrappers such as functools.lru_cache, when a directive marks them.
    return callable(member) and bool(directives_of(member))


def _describe_method(klass: type, name: str, member: Any) -> MethodDescriptor:
    if isinstance(member, staticmethod):
        binding, func = "static", member.__func__
    elif isinstance(member, classmethod):
        binding, func = "class", member.__func__
    else:
        binding, func = "instance", member

    try:
        hints = get_type_hints(inspect.unwrap(func), include_extras=True)
        parameters = list(inspect.signature(func).parameters.values())
    except Exception as e:
        return MethodDescriptor(
            klass,
            name,
            directives_of(func),
            binding,
            EMPTY,
            (),
            f"{type(e).__name__}: {e}",
            func,
        )

    if binding != "static":
        parameters = parameters[1:]

    return MethodDescriptor(
        klass,
        name,
        directives_of(func),
        binding,
        hints.get("return", EMPTY),
        tuple(Parameter(p.name, hints.get(p.name, EMPTY), p.kind) for p in parameters),
        function=func,
    )

"""Domain models shared by the configuration pass and the host container."""

import collections.abc
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Callable, Optional, get_args, get_origin

__all__ = [
    "BindingKey",
    "Dependency",
    "ProviderMethod",
    "Provenance",
    "BindingSpec",
    "ProblemKind",
    "ConfigurationProblem",
    "canonical_name",
    "display_name",
]

_SET_ORIGINS = (set, frozenset, collections.abc.Set)


def display_name(target: Any) -> str:
    """Short human readable name for a type, annotation or source module.

    Example:
        >>> display_name(Database)          # "Database"
        >>> display_name(frozenset[Plugin])  # "frozenset[Plugin]"
    """
    if isinstance(target, str):
        return target
    if get_origin(target) is not None:
        args = ", ".join(display_name(arg) for arg in get_args(target))
        return f"{display_name(get_origin(target))}[{args}]"
    if isinstance(target, type) or callable(target):
        return getattr(target, "__qualname__", repr(target))
    return repr(target)


def canonical_name(cls: type) -> str:
    """Fully qualified name of a class, as used in problem messages."""
    if not isinstance(cls, type):
        return repr(cls)
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class BindingKey:
    """Identifies a binding in the host container.

    Attributes:
        type: The provided type. Set bindings use ``frozenset[T]``.
        qualifier: An optional name distinguishing bindings of the same type.
    """

    type: Any
    qualifier: Optional[str] = None

    @classmethod
    def of(cls, annotation: Any) -> "BindingKey":
        """Build a key from a type annotation.

        ``Annotated[T, "name"]`` qualifies the key with ``"name"``, and any
        set-like annotation (``set[T]``, ``frozenset[T]``, ``Set[T]``) maps to
        the ``frozenset[T]`` key that set contributions are merged into.
        """
        if isinstance(annotation, BindingKey):
            return annotation

        qualifier = None
        if get_origin(annotation) is Annotated:
            annotation, *metadata = get_args(annotation)
            qualifier = next((m for m in metadata if isinstance(m, str)), None)

        if get_origin(annotation) in _SET_ORIGINS and get_args(annotation):
            annotation = frozenset[get_args(annotation)[0]]

        return cls(annotation, qualifier)

    def set_of(self) -> "BindingKey":
        """The key of the set this key's values are collected into."""
        return BindingKey(frozenset[self.type], self.qualifier)

    def __str__(self) -> str:
        if self.qualifier is None:
            return display_name(self.type)
        return f"{display_name(self.type)} named '{self.qualifier}'"


@dataclass(frozen=True)
class Dependency:
    """A parameter of a provider and the binding that satisfies it."""

    parameter_name: str
    key: BindingKey


@dataclass(frozen=True)
class ProviderMethod:
    """A procedure the host invokes to produce a binding's value.

    Dependencies are passed by parameter name.
    """

    func: Callable
    dependencies: tuple[Dependency, ...] = ()

    def __call__(self, **dependencies: Any) -> Any:
        return self.func(**dependencies)


@dataclass(frozen=True)
class Provenance:
    """Where a binding came from, for diagnostics."""

    module: Any
    method_name: str

    def __str__(self) -> str:
        return f"{display_name(self.module)}.{self.method_name}()"


@dataclass(frozen=True)
class BindingSpec:
    """A translated provider, ready for installation in the host.

    Attributes:
        key: The key of the provided value; the element key for set contributions.
        producer: The procedure producing the value.
        provenance: The module and method the binding was translated from.
        contributes_to_set: Whether the value is one element of ``frozenset[key]``.
    """

    key: BindingKey
    producer: ProviderMethod
    provenance: Provenance
    contributes_to_set: bool = False

    @property
    def resolved_key(self) -> BindingKey:
        return self.key.set_of() if self.contributes_to_set else self.key


class ProblemKind(Enum):
    STRUCTURAL = "structural"
    UNSUPPORTED_DIRECTIVE = "unsupported directive"
    INVALID_PROVIDER = "invalid provider"


@dataclass(frozen=True)
class ConfigurationProblem:
    """A problem found during a configuration pass. Collected, never raised.

    Attributes:
        message: Description of the problem.
        source: The offending module type or method descriptor.
        kind: Which check found the problem.
    """

    message: str
    source: Any
    kind: Optional[ProblemKind] = None

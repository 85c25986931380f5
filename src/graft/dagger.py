"""Decorators describing Dagger-style modules.

A Dagger-style module is a class decorated with :func:`module` whose methods are
decorated with directives such as :data:`provides`. Decorating only records
metadata on the class or function; nothing is registered anywhere until the
module is passed to :func:`graft.adapter.adapt`.

Example:
    >>> @module
    ... class DatabaseModule:
    ...     def __init__(self, url: str):
    ...         self.url = url
    ...
    ...     @provides
    ...     def database(self) -> Database:
    ...         return Database(self.url)
    ...
    ...     @provides
    ...     @into_set
    ...     def migration(self, database: Database) -> Migration:
    ...         return Migration(database)

Only ``provides`` and ``into_set`` can be translated; the remaining directives
exist so that modules written against the full vocabulary can be described,
and are reported as unsupported by the module validator.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

__all__ = [
    "FOREIGN_NAMESPACE",
    "Directive",
    "ModuleMarker",
    "module",
    "module_marker_of",
    "directives_of",
    "provides",
    "into_set",
    "elements_into_set",
    "into_map",
    "binds",
    "binds_optional_of",
    "multibinds",
    "reusable",
    "SUPPORTED_DIRECTIVES",
]

FOREIGN_NAMESPACE = "dagger"

_MODULE_ATTRIBUTE = "__dagger_module__"
_DIRECTIVES_ATTRIBUTE = "__directives__"


@dataclass(frozen=True)
class Directive:
    """A marker attached to a method, guiding how the method is translated.

    Directives are decorators: applying one records it on the function (or on
    the function wrapped by a ``staticmethod``/``classmethod``) and returns the
    target unchanged. Directives from namespaces other than
    :data:`FOREIGN_NAMESPACE` are ignored by the adapter.
    """

    namespace: str
    name: str

    def __call__(self, target: Any) -> Any:
        func = _underlying_function(target)
        setattr(func, _DIRECTIVES_ATTRIBUTE, (self, *directives_of(func)))
        return target

    def __str__(self) -> str:
        return f"@{self.namespace}.{self.name}"


@dataclass(frozen=True)
class ModuleMarker:
    """The arguments given to :func:`module`."""

    includes: tuple[type, ...] = ()
    subcomponents: tuple[type, ...] = ()


def module(
    cls: Optional[type] = None,
    *,
    includes: tuple[type, ...] = (),
    subcomponents: tuple[type, ...] = (),
) -> Callable:
    """Mark a class as a Dagger-style module.

    Usable bare (``@module``) or with arguments
    (``@module(includes=[OtherModule])``). The marker belongs to the decorated
    class only; subclasses must be decorated themselves.

    Args:
        cls: The class, when used without arguments.
        includes: Modules this module includes.
        subcomponents: Subcomponents this module declares.
    """
    marker = ModuleMarker(tuple(includes), tuple(subcomponents))

    def decorator(target: type) -> type:
        if not inspect.isclass(target):
            raise TypeError(f"{FOREIGN_NAMESPACE}.module can only decorate classes, not {target!r}")
        setattr(target, _MODULE_ATTRIBUTE, marker)
        return target

    if cls is None:
        return decorator
    return decorator(cls)


def module_marker_of(cls: type) -> Optional[ModuleMarker]:
    """The marker declared on ``cls`` itself, ignoring base classes."""
    marker = vars(cls).get(_MODULE_ATTRIBUTE)
    return marker if isinstance(marker, ModuleMarker) else None


def directives_of(target: Any) -> tuple[Directive, ...]:
    """Directives attached to a function, outermost decorator first."""
    return getattr(_underlying_function(target), _DIRECTIVES_ATTRIBUTE, ())


def _underlying_function(target: Any) -> Any:
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


provides = Directive(FOREIGN_NAMESPACE, "provides")
into_set = Directive(FOREIGN_NAMESPACE, "into_set")
elements_into_set = Directive(FOREIGN_NAMESPACE, "elements_into_set")
into_map = Directive(FOREIGN_NAMESPACE, "into_map")
binds = Directive(FOREIGN_NAMESPACE, "binds")
binds_optional_of = Directive(FOREIGN_NAMESPACE, "binds_optional_of")
multibinds = Directive(FOREIGN_NAMESPACE, "multibinds")
reusable = Directive(FOREIGN_NAMESPACE, "reusable")

SUPPORTED_DIRECTIVES = frozenset({provides, into_set})

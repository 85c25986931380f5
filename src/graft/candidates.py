"""Module candidates: the objects handed to a configuration pass."""

import inspect
from dataclasses import dataclass
from typing import Any, Optional, Union

__all__ = ["TypeOnly", "Instance", "ModuleCandidate", "as_candidate"]


@dataclass(frozen=True)
class TypeOnly:
    """A module given as a class. Only static and class methods can be invoked."""

    module_type: type

    @property
    def instance(self) -> Optional[Any]:
        return None


@dataclass(frozen=True, eq=False)
class Instance:
    """A module given as an instance of its class."""

    module_type: type
    instance: Any


ModuleCandidate = Union[TypeOnly, Instance]


def as_candidate(module_object: Any) -> ModuleCandidate:
    """Classify an object passed as a module.

    Example:
        >>> as_candidate(DatabaseModule)        # TypeOnly(DatabaseModule)
        >>> as_candidate(DatabaseModule("db"))  # Instance(DatabaseModule, <...>)
    """
    if isinstance(module_object, (TypeOnly, Instance)):
        return module_object
    if inspect.isclass(module_object):
        return TypeOnly(module_object)
    return Instance(type(module_object), module_object)

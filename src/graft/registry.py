"""The host container's configuration sink: a registry of bindings."""

import inspect
import logging
from typing import Any, Callable, Optional, get_type_hints

from graft.domain import BindingKey, BindingSpec, Dependency, Provenance, ProviderMethod
from graft.errors import DependencyError
from graft.sink import ErrorSink

__all__ = ["BindingRegistry"]

logger = logging.getLogger(__name__)


class BindingRegistry:
    """Registry for bindings, filled by host modules and native providers.

    The registry implements :class:`~graft.sink.ConfigurationSink`, so modules
    installed into it (such as the result of :func:`graft.adapter.adapt`) report
    their bindings and problems here. Problems are held until a bundle is made
    from the registry.
    """

    def __init__(self):
        self._bindings: list[BindingSpec] = []
        self._errors = ErrorSink()

    def install(self, module: Any):
        """Install a host module: anything with a ``configure(sink)`` method."""
        logger.debug("Installing %r", module)
        module.configure(self)

    def register(self, binding: BindingSpec):
        """Register a binding explicitly.

        Args:
            binding: The binding to be registered.
        """
        logger.debug("Registered %s from %s", binding.resolved_key, binding.provenance)
        self._bindings.append(binding)

    def registered_bindings(self) -> list[BindingSpec]:
        return list(self._bindings)

    @property
    def errors(self) -> ErrorSink:
        return self._errors

    def add_error(self, message: str, source: Any):
        self._errors.add_error(message, source)

    def install_binding(self, key: BindingKey, producer: ProviderMethod, provenance: Provenance):
        self.register(BindingSpec(key, producer, provenance))

    def install_set_contribution(
        self, element_key: BindingKey, producer: ProviderMethod, provenance: Provenance
    ):
        self.register(BindingSpec(element_key, producer, provenance, contributes_to_set=True))

    def provides(self, qualifier: Optional[str] = None, into_set: bool = False) -> Callable:
        """Decorator to register a function as a provider.

        The binding key is the function's return annotation, qualified by
        ``qualifier`` if given.

        Args:
            qualifier: Optional name distinguishing this binding from others of the same type.
            into_set: Contribute the value to ``frozenset[return type]`` instead.

        Returns:
            A decorator that registers the function and returns it unchanged.

        Example:
            @registry.provides()
            def make_clock() -> Clock:
                return SystemClock()
        """

        def decorator(func: Callable) -> Callable:
            key = _return_key(func)
            if qualifier is not None:
                key = BindingKey(key.type, qualifier)

            self.register(
                BindingSpec(
                    key,
                    ProviderMethod(func, _get_dependencies(func)),
                    Provenance(func.__module__, func.__name__),
                    into_set,
                )
            )
            return func

        return decorator


def _return_key(func: Callable) -> BindingKey:
    return_type = get_type_hints(func, include_extras=True).get("return", None)
    if return_type is None:
        raise DependencyError(
            f"Function {func.__name__} is decorated with @provides "
            "but does not have an annotated return type"
        )
    return BindingKey.of(return_type)


def _get_dependencies(func: Callable) -> tuple[Dependency, ...]:
    """Extract dependencies from a function's parameter annotations.

    Example:
        >>> def service(db: Database, cache: Annotated[Cache, "redis"]) -> Service:
        ...     pass
        >>> _get_dependencies(service)
        (Dependency("db", BindingKey(Database)), Dependency("cache", BindingKey(Cache, "redis")))
    """
    hints = get_type_hints(func, include_extras=True)
    dependencies = []

    for name in inspect.signature(func).parameters:
        try:
            annotation = hints[name]
        except KeyError:
            raise DependencyError(
                "Dependency <%s> of provider <%s> is not annotated" % (name, func.__name__)
            )
        dependencies.append(Dependency(name, BindingKey.of(annotation)))

    return tuple(dependencies)

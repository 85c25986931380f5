"""Dagger-style modules for the graft container.

graft adapts modules written in the Dagger style (classes decorated with
``@dagger.module`` whose methods are decorated with ``@dagger.provides``) into
bindings of a small, explicit dependency injection container.

Adapting a module runs a single configuration pass: every module is checked
and translated, and every problem found is collected rather than raised, so a
failed configuration reports all of its problems at once.

Basic Usage:
    >>> from graft import dagger
    >>> from graft.adapter import adapt
    >>> from graft.builders import make_bundle
    >>> from graft.registry import BindingRegistry
    >>>
    >>> @dagger.module
    ... class ClockModule:
    ...     @dagger.provides
    ...     @staticmethod
    ...     def clock() -> Clock:
    ...         return SystemClock()
    >>>
    >>> registry = BindingRegistry()
    >>> registry.install(adapt(ClockModule))
    >>> bundle = make_bundle(registry)
    >>> bundle[Clock]

Supported directives are ``provides`` and ``provides`` combined with
``into_set``. Sub-modules (``includes``/``subcomponents``) and every other
directive are reported as configuration problems.

The package consists of:
    - dagger: the module and directive decorators
    - adapter: the configuration pass and ``adapt`` entry point
    - candidates, descriptors: the introspected view of module classes
    - validation, translation: the two stages of the pass
    - sink: the configuration sink contract and the error sink
    - registry, provider_set, bundle_manifest, bundle, builders: the host container
    - domain, errors: shared models and exceptions
"""

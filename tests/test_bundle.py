from dataclasses import dataclass
from typing import Annotated

import pytest

from graft import dagger
from graft.adapter import adapt
from graft.builders import make_bundle, make_manifest
from graft.domain import BindingKey
from graft.errors import ConfigurationFailed, DependencyError, ProvisionError
from graft.registry import BindingRegistry


class Database:
    def __init__(self, url: str):
        self.url = url


class Repository:
    def __init__(self, database: Database):
        self.database = database


class Plugin:
    def __init__(self, name: str):
        self.name = name


@dataclass
class Extension:
    name: str


class PluginHost:
    def __init__(self, plugins: frozenset[Plugin]):
        self.plugins = plugins


@dagger.module
class DatabaseModule:
    def __init__(self, url: str):
        self.url = url

    @dagger.provides
    def database(self) -> Database:
        return Database(self.url)

    @dagger.provides
    @staticmethod
    def repository(database: Database) -> Repository:
        return Repository(database)


@dagger.module
class CorePlugins:
    @dagger.provides
    @dagger.into_set
    @staticmethod
    def logging_plugin() -> Plugin:
        return Plugin("logging")


@dagger.module
class ExtraPlugins:
    def __init__(self, name: str):
        self.name = name

    @dagger.provides
    @dagger.into_set
    def extra_plugin(self) -> Plugin:
        return Plugin(self.name)

    @dagger.provides
    @staticmethod
    def plugin_host(plugins: set[Plugin]) -> PluginHost:
        return PluginHost(plugins)


@pytest.fixture
def registry() -> BindingRegistry:
    return BindingRegistry()


def test_adapted_providers_resolve_in_dependency_order(registry):
    registry.install(adapt(DatabaseModule("sqlite://memory")))

    bundle = make_bundle(registry)

    assert bundle[Repository].database is bundle[Database]
    assert bundle[Database].url == "sqlite://memory"


def test_set_contributions_from_several_modules_are_merged(registry):
    registry.install(adapt(CorePlugins, ExtraPlugins("metrics")))

    bundle = make_bundle(registry)

    assert {plugin.name for plugin in bundle[set[Plugin]]} == {"logging", "metrics"}
    assert bundle[PluginHost].plugins is bundle[frozenset[Plugin]]


def test_native_providers_satisfy_adapted_dependencies(registry):
    @dagger.module
    class UrlModule:
        @dagger.provides
        @staticmethod
        def database(url: Annotated[str, "url"]) -> Database:
            return Database(url)

    @registry.provides(qualifier="url")
    def make_url() -> str:
        return "postgres://db"

    registry.install(adapt(UrlModule))

    assert make_bundle(registry)[Database].url == "postgres://db"


def test_configuration_problems_fail_bundle_creation_together(registry):
    class NotAModule:
        pass

    @dagger.module
    class WithBinds:
        @dagger.binds
        def bound(self) -> Database:
            pass

    registry.install(adapt(NotAModule, WithBinds()))

    with pytest.raises(ConfigurationFailed, match="2 errors") as raised:
        make_bundle(registry)

    assert len(raised.value.problems) == 2
    assert "1) " in str(raised.value) and "2) " in str(raised.value)
    assert "NotAModule must be decorated with @dagger.module" in str(raised.value)


def test_missing_instance_is_reported_when_bundle_is_built(registry):
    registry.install(adapt(DatabaseModule))

    manifest = make_manifest(registry)
    assert BindingKey(Database) in manifest.build_order

    with pytest.raises(ProvisionError, match=r"DatabaseModule.database\(\) is an instance method"):
        make_bundle(registry)


def test_duplicate_bindings_are_rejected(registry):
    registry.install(adapt(DatabaseModule("a"), DatabaseModule("b")))

    with pytest.raises(DependencyError, match="Duplicate bindings for key 'Database'"):
        make_bundle(registry)


def test_set_key_cannot_also_be_bound_directly(registry):
    @registry.provides()
    def make_plugins() -> frozenset[Plugin]:
        return frozenset()

    registry.install(adapt(CorePlugins))

    with pytest.raises(DependencyError, match="bound directly and also receive set contributions"):
        make_bundle(registry)


def test_missing_dependency_raises(registry):
    @dagger.module
    class NeedsDatabase:
        @dagger.provides
        @staticmethod
        def repository(database: Database) -> Repository:
            return Repository(database)

    registry.install(adapt(NeedsDatabase))

    with pytest.raises(
        DependencyError,
        match=r"unsatisfied dependencies: Database \(required by .*NeedsDatabase\.repository\(\)\)",
    ):
        make_bundle(registry)


def test_dependency_cycle_detected(registry):
    @registry.provides(qualifier="a")
    def make_a(b: Annotated[int, "b"]) -> int:
        return b + 1

    @registry.provides(qualifier="b")
    def make_b(a: Annotated[int, "a"]) -> int:
        return a + 1

    with pytest.raises(DependencyError, match="Unresolvable dependencies"):
        make_bundle(registry)


def test_bundle_lookup_by_key_or_annotation(registry):
    @registry.provides(qualifier="greeting")
    def make_greeting() -> str:
        return "hello"

    bundle = make_bundle(registry)

    assert bundle[BindingKey(str, "greeting")] == "hello"
    assert bundle[Annotated[str, "greeting"]] == "hello"
    assert str not in bundle
    with pytest.raises(KeyError):
        bundle[str]


def test_unhashable_set_contribution_names_its_provider(registry):
    @dagger.module
    class Extensions:
        @dagger.provides
        @dagger.into_set
        @staticmethod
        def extension() -> Extension:
            return Extension("audit")

    registry.install(adapt(Extensions))

    with pytest.raises(
        ProvisionError,
        match=r"Extensions.extension\(\) contributed an unhashable Extension "
        r"to frozenset\[Extension\]",
    ):
        make_bundle(registry)

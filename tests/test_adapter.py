import pytest

from graft import dagger
from graft.adapter import AdaptedModules, adapt, configure_modules
from graft.domain import BindingKey


class RecordingSink:
    def __init__(self):
        self.errors = []
        self.bindings = []
        self.contributions = []

    def add_error(self, message, source):
        self.errors.append((message, source))

    def install_binding(self, key, producer, provenance):
        self.bindings.append((key, producer, provenance))

    def install_set_contribution(self, element_key, producer, provenance):
        self.contributions.append((element_key, producer, provenance))

    @property
    def messages(self):
        return [message for message, _ in self.errors]


class X:
    pass


class Plugin:
    pass


@dagger.module
class T:
    @dagger.provides
    @staticmethod
    def provide_x() -> X:
        return X()


class V:
    pass


@dagger.module(subcomponents=[V])
class U:
    @dagger.provides
    @staticmethod
    def provide_x() -> X:
        return X()


@dagger.module
class W:
    @dagger.binds
    def m(self) -> X:
        pass


class NotAModule:
    @dagger.provides
    def provide_x(self) -> X:
        return X()

    @dagger.binds
    def bound(self) -> X:
        pass


@dagger.module
class FirstPlugins:
    @dagger.provides
    @dagger.into_set
    @staticmethod
    def plugin() -> Plugin:
        return Plugin()


@dagger.module
class SecondPlugins:
    @dagger.provides
    @dagger.into_set
    def plugin(self) -> Plugin:
        return Plugin()

    @dagger.provides
    @dagger.into_set
    def another_plugin(self) -> Plugin:
        return Plugin()


@pytest.fixture
def sink():
    return RecordingSink()


def test_valid_module_yields_one_binding_and_no_errors(sink):
    configure_modules([T], sink)

    assert sink.errors == []
    assert [key for key, _, _ in sink.bindings] == [BindingKey(X)]
    assert sink.contributions == []


def test_module_with_sub_modules_yields_one_error_and_no_bindings(sink):
    configure_modules([U], sink)

    [(message, source)] = sink.errors
    assert f"{__name__}.V" in message
    assert source is U
    assert sink.bindings == []


def test_unsupported_directive_yields_one_error_naming_method_and_directive(sink):
    configure_modules([W()], sink)

    assert sink.messages == [
        "W.m() is decorated with @dagger.binds which is not supported by graft"
    ]
    assert sink.bindings == []


@pytest.mark.parametrize("module_object", [NotAModule, NotAModule()])
def test_unmarked_candidate_yields_exactly_one_error_and_no_bindings(sink, module_object):
    configure_modules([module_object], sink)

    assert sink.messages == [f"{__name__}.NotAModule must be decorated with @dagger.module"]
    assert sink.bindings == []
    assert sink.contributions == []


def test_sub_module_error_lists_every_sub_module(sink):
    class A:
        pass

    class B:
        pass

    @dagger.module(includes=[A, B], subcomponents=[V])
    class Composite:
        pass

    configure_modules([Composite], sink)

    [message] = sink.messages
    for sub_module in (A, B, V):
        assert f"{sub_module.__module__}.{sub_module.__qualname__}" in message


def test_problems_from_every_module_are_reported_in_order(sink):
    configure_modules([NotAModule, W(), U, T], sink)

    assert [source for _, source in sink.errors][0] is NotAModule
    assert sink.messages[1].startswith("W.m()")
    assert sink.errors[2][1] is U
    assert len(sink.errors) == 3
    assert [provenance.module for _, _, provenance in sink.bindings] == [T]


def test_methods_without_problems_are_bound_despite_errors_on_others(sink):
    @dagger.module
    class Partial:
        @dagger.binds
        def bound(self) -> X:
            pass

        @dagger.provides
        def provided(self) -> Plugin:
            return Plugin()

    configure_modules([Partial()], sink)

    assert len(sink.errors) == 1
    assert [key for key, _, _ in sink.bindings] == [BindingKey(Plugin)]


def test_each_set_contribution_is_installed_separately(sink):
    configure_modules([FirstPlugins, SecondPlugins()], sink)

    assert [key for key, _, _ in sink.contributions] == [BindingKey(Plugin)] * 3
    assert [str(provenance) for _, _, provenance in sink.contributions] == [
        "FirstPlugins.plugin()",
        "SecondPlugins.plugin()",
        "SecondPlugins.another_plugin()",
    ]
    assert sink.bindings == []


def test_running_the_pass_twice_gives_identical_results():
    modules = [NotAModule(), W(), U, T, FirstPlugins, SecondPlugins()]
    first, second = RecordingSink(), RecordingSink()

    configure_modules(modules, first)
    configure_modules(modules, second)

    assert first.errors == second.errors
    assert {key for key, _, _ in first.bindings} == {key for key, _, _ in second.bindings}
    assert [key for key, _, _ in first.contributions] == [
        key for key, _, _ in second.contributions
    ]


def test_adapt_wraps_modules_for_installation(sink):
    t = T()
    adapted = adapt(t, W)

    assert isinstance(adapted, AdaptedModules)
    assert adapted.module_objects == (t, W)
    assert repr(adapted).startswith("AdaptedModules(modules=[")

    adapted.configure(sink)

    assert len(sink.errors) == 1
    assert len(sink.bindings) == 1


def test_empty_pass_reports_nothing(sink):
    configure_modules([], sink)

    assert (sink.errors, sink.bindings, sink.contributions) == ([], [], [])

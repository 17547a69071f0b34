"""Tests for switchyard.cli._resolve — locating the dispatcher."""

import sys
import types

import pytest

from switchyard.cli._resolve import load_or_exit, resolve_dispatcher
from switchyard.dispatcher import Dispatcher
from switchyard.errors import ConfigurationError
from switchyard.routing.table import build_router

TABLE = {
    "/": [{"method": "GET", "uri": "/", "controller": "home", "action": "index"}],
}


@pytest.fixture
def _fake_dispatcher_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with switchyard targets on sys.modules."""
    mod = types.ModuleType("_fake_switchyard_app")
    mod.dispatcher = Dispatcher({})  # type: ignore[attr-defined]
    mod.custom = Dispatcher({})  # type: ignore[attr-defined]
    mod.ROUTES = TABLE  # type: ignore[attr-defined]
    mod.router = build_router(TABLE)  # type: ignore[attr-defined]
    mod.BROKEN = {"/": [{"uri": "/"}]}  # type: ignore[attr-defined]
    mod.not_a_dispatcher = "just a string"  # type: ignore[attr-defined]
    mod.make_dispatcher = lambda: Dispatcher({})  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_switchyard_app", mod)


@pytest.mark.usefixtures("_fake_dispatcher_module")
class TestResolveDispatcher:
    def test_explicit_attribute(self) -> None:
        dispatcher = resolve_dispatcher("_fake_switchyard_app:custom")
        assert dispatcher is sys.modules["_fake_switchyard_app"].custom

    def test_default_attribute(self) -> None:
        """Omitting :name defaults to 'dispatcher'."""
        dispatcher = resolve_dispatcher("_fake_switchyard_app")
        assert dispatcher is sys.modules["_fake_switchyard_app"].dispatcher

    def test_route_table_wrapped(self) -> None:
        dispatcher = resolve_dispatcher("_fake_switchyard_app:ROUTES")
        assert isinstance(dispatcher, Dispatcher)
        assert [route.path for route in dispatcher.router.routes] == ["/"]

    def test_router_wrapped(self) -> None:
        dispatcher = resolve_dispatcher("_fake_switchyard_app:router")
        assert dispatcher.router is sys.modules["_fake_switchyard_app"].router

    def test_malformed_table(self) -> None:
        with pytest.raises(ConfigurationError, match="is missing"):
            resolve_dispatcher("_fake_switchyard_app:BROKEN")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_dispatcher("nonexistent_module_xyz:dispatcher")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_dispatcher("_fake_switchyard_app:does_not_exist")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"is a str; expected a switchyard\.Dispatcher"):
            resolve_dispatcher("_fake_switchyard_app:not_a_dispatcher")

    def test_callables_not_called(self) -> None:
        with pytest.raises(TypeError, match="is a function"):
            resolve_dispatcher("_fake_switchyard_app:make_dispatcher")


@pytest.mark.usefixtures("_fake_dispatcher_module")
class TestLoadOrExit:
    def test_returns_dispatcher(self) -> None:
        assert isinstance(load_or_exit("_fake_switchyard_app:ROUTES"), Dispatcher)

    def test_configuration_error_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            load_or_exit("_fake_switchyard_app:BROKEN")
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("Error: ")

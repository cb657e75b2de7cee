"""
Tests for CommandRegistry lookup and registration.
"""

import pytest

from rfscript.commands import BUILTIN_COMMANDS, default_registry
from rfscript.exceptions import UnknownCommand
from rfscript.script import CommandRegistry


def _noop(snap, args):
    pass


class TestCommandRegistry:
    """Test name -> handler bindings."""

    def test_register_and_lookup(self):
        registry = CommandRegistry()
        registry.register("noop", _noop)
        assert registry.lookup("noop") is _noop
        assert "noop" in registry
        assert len(registry) == 1

    def test_initial_handlers_are_copied(self):
        handlers = {"noop": _noop}
        registry = CommandRegistry(handlers)
        handlers["other"] = _noop
        assert "other" not in registry

    def test_unknown_command(self):
        registry = CommandRegistry()
        with pytest.raises(UnknownCommand) as exc_info:
            registry.lookup("frobnicate")
        assert exc_info.value.name == "frobnicate"
        assert str(exc_info.value) == "unknown command frobnicate"

    def test_decorator_registers(self):
        registry = CommandRegistry()

        @registry.command("touch")
        def touch(snap, args):
            pass

        assert registry.lookup("touch") is touch

    def test_rebinding_replaces(self):
        registry = CommandRegistry({"noop": _noop})

        def other(snap, args):
            pass

        registry.register("noop", other)
        assert registry.lookup("noop") is other
        assert len(registry) == 1

    @pytest.mark.parametrize("name", ["", "two words", "tab\tname"])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(ValueError):
            CommandRegistry().register(name, _noop)

    def test_names_sorted(self):
        registry = CommandRegistry({"rm": _noop, "add": _noop, "mv": _noop})
        assert registry.names() == ["add", "mv", "rm"]


class TestDefaultRegistry:
    """Test the bundled command set."""

    def test_builtin_commands_present(self):
        registry = default_registry()
        assert registry.names() == sorted(BUILTIN_COMMANDS)
        for name in ("add", "debug", "mv", "rm"):
            assert name in registry

    def test_registries_are_independent(self):
        first = default_registry()
        second = default_registry()
        first.register("extra", _noop)
        assert "extra" in first
        assert "extra" not in second

"""Tests for yeet.keymap.keymap -- default bindings and user overrides."""

from __future__ import annotations

import pytest

from yeet.buffer.mode import MODES
from yeet.keymap.actions import ACTIONS, AppCommand
from yeet.keymap.keymap import DEFAULT_BINDINGS, KeyMap, get_action
from yeet.keymap.keys import parse_sequence
from yeet.keymap.tree import KeyMapError, Terminal


class TestDefaults:
    def test_default_bindings_compile(self) -> None:
        tree = KeyMap().into_tree()
        for mode in MODES:
            assert tree.bindings(mode)

    def test_every_default_names_an_action(self) -> None:
        for bindings in DEFAULT_BINDINGS.values():
            for name in bindings.values():
                assert name in ACTIONS

    def test_navigation_defaults(self) -> None:
        tree = KeyMap().into_tree()
        node = tree.get_node("navigation", parse_sequence("h"))
        assert node == Terminal(ACTIONS["navigate_to_parent"])
        assert isinstance(ACTIONS["navigate_to_parent"].message, AppCommand)

    def test_get_sequences(self) -> None:
        keymap = KeyMap()
        assert keymap.get_sequences("navigation", "navigate_to_parent") == ["h", "<left>"]

    def test_unknown_action(self) -> None:
        with pytest.raises(KeyMapError):
            get_action("fly")


class TestOverrides:
    def test_add_binding(self) -> None:
        keymap = KeyMap({"navigation": {"J": "move_bottom"}})
        assert keymap.get_bindings("navigation")["J"] == "move_bottom"
        assert keymap.get_bindings("navigation")["j"] == "move_down"

    def test_replace_binding(self) -> None:
        keymap = KeyMap({"navigation": {"q": "enter_normal_mode"}})
        assert keymap.get_bindings("navigation")["q"] == "enter_normal_mode"

    def test_unbind(self) -> None:
        keymap = KeyMap({"navigation": {"q": None}})
        assert "q" not in keymap.get_bindings("navigation")
        assert keymap.into_tree().get_node("navigation", parse_sequence("q")) is None

    def test_unknown_action_is_rejected(self) -> None:
        with pytest.raises(KeyMapError):
            KeyMap({"navigation": {"x": "fly"}})

    def test_unknown_mode_is_rejected(self) -> None:
        with pytest.raises(KeyMapError):
            KeyMap({"visual": {"x": "move_down"}})

    def test_conflicting_override_fails_on_compile(self) -> None:
        keymap = KeyMap({"navigation": {"g": "move_top"}})
        with pytest.raises(KeyMapError):
            keymap.into_tree()

    def test_unbinding_resolves_conflict(self) -> None:
        keymap = KeyMap({"navigation": {"gg": None, "g": "move_top"}})
        tree = keymap.into_tree()
        assert tree.get_node("navigation", parse_sequence("g")) == Terminal(ACTIONS["move_top"])

    def test_set_config_starts_from_defaults(self) -> None:
        keymap = KeyMap({"navigation": {"q": None}})
        keymap.set_config({})
        assert keymap.get_bindings("navigation")["q"] == "quit"

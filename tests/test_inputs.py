"""Tests for the immutable input widgets."""

from __future__ import annotations

from gh_triage.inputs import OptionInput, OptionsInput, TextInput


def type_text(text_input: TextInput, text: str) -> TextInput:
    for ch in text:
        text_input = text_input.update(ch, ch)
    return text_input


class TestTextInput:
    def test_typing_appends_at_cursor(self) -> None:
        result = type_text(TextInput(), "apex")
        assert result == TextInput("apex", 4)

    def test_insert_in_the_middle(self) -> None:
        result = TextInput("ae", 1).update("p", "p")
        assert result == TextInput("ape", 2)

    def test_backspace(self) -> None:
        assert TextInput("abc", 3).update("backspace") == TextInput("ab", 2)
        assert TextInput("abc", 0).update("backspace") == TextInput("abc", 0)

    def test_delete_under_cursor(self) -> None:
        assert TextInput("abc", 1).update("delete") == TextInput("ac", 1)

    def test_cursor_movement_is_bounded(self) -> None:
        text_input = TextInput("ab", 2)
        assert text_input.update("right").cursor == 2
        assert text_input.update("left").cursor == 1
        assert text_input.update("home").cursor == 0
        assert TextInput("ab", 0).update("left").cursor == 0
        assert TextInput("ab", 0).update("end").cursor == 2

    def test_ctrl_u_clears_before_cursor(self) -> None:
        assert TextInput("hello", 3).update("ctrl+u") == TextInput("lo", 0)

    def test_space_is_inserted(self) -> None:
        assert TextInput("a", 1).update("space", " ") == TextInput("a ", 2)

    def test_non_printable_keys_are_ignored(self) -> None:
        text_input = TextInput("a", 1)
        assert text_input.update("enter", "\r") is text_input
        assert text_input.update("f1") is text_input

    def test_update_returns_new_value(self) -> None:
        original = TextInput()
        original.update("x", "x")
        assert original == TextInput()


class TestOptionsInput:
    def test_toggle_selection(self) -> None:
        options = OptionsInput(("bug", "docs", "ux"))
        options = options.update("space", " ")
        options = options.update("down").update("down").update("space", " ")
        assert options.value() == ["bug", "ux"]
        assert options.update("space", " ").value() == ["bug"]

    def test_cursor_is_bounded(self) -> None:
        options = OptionsInput(("a", "b"))
        assert options.update("up").cursor == 0
        assert options.update("down").update("down").update("down").cursor == 1

    def test_vim_keys(self) -> None:
        options = OptionsInput(("a", "b"))
        assert options.update("j", "j").cursor == 1
        assert options.update("j", "j").update("k", "k").cursor == 0

    def test_empty_options_ignore_keys(self) -> None:
        options = OptionsInput()
        assert options.update("space", " ") is options
        assert options.value() == []


class TestOptionInput:
    def test_value_follows_cursor(self) -> None:
        option = OptionInput(("Low", "Medium", "High"))
        assert option.value() == "Low"
        assert option.update("down").update("down").value() == "High"
        assert option.update("down").update("up").value() == "Low"

    def test_empty_value(self) -> None:
        assert OptionInput().value() == ""

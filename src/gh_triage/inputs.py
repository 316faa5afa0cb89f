"""Immutable state for the editable widgets driven by the reducer.

Each input is a frozen value with a pure ``update`` returning a new value,
so the reducer can embed them in the model without sharing mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class TextInput:
    """Single-line text buffer with a cursor."""

    value: str = ""
    cursor: int = 0

    def update(self, key: str, character: str | None = None) -> TextInput:
        """Apply one key press and return the edited buffer."""
        value, cursor = self.value, max(0, min(self.cursor, len(self.value)))
        if key == "left":
            return replace(self, cursor=max(0, cursor - 1))
        if key == "right":
            return replace(self, cursor=min(len(value), cursor + 1))
        if key in ("home", "ctrl+a"):
            return replace(self, cursor=0)
        if key in ("end", "ctrl+e"):
            return replace(self, cursor=len(value))
        if key in ("backspace", "ctrl+h"):
            if cursor == 0:
                return self
            return TextInput(value[: cursor - 1] + value[cursor:], cursor - 1)
        if key == "delete":
            return TextInput(value[:cursor] + value[cursor + 1 :], cursor)
        if key == "ctrl+u":
            return TextInput(value[cursor:], 0)
        if character and character.isprintable():
            return TextInput(value[:cursor] + character + value[cursor:], cursor + len(character))
        return self


@dataclass(frozen=True, slots=True)
class OptionsInput:
    """Multi-select list: a cursor plus a set of toggled indexes."""

    options: tuple[str, ...] = ()
    selected: frozenset[int] = frozenset()
    cursor: int = 0

    def update(self, key: str, character: str | None = None) -> OptionsInput:
        if not self.options:
            return self
        if key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1))
        if key in ("down", "j"):
            return replace(self, cursor=min(len(self.options) - 1, self.cursor + 1))
        if key == "space":
            return replace(self, selected=self.selected ^ {self.cursor})
        return self

    def value(self) -> list[str]:
        """Selected option names, in option order."""
        return [option for i, option in enumerate(self.options) if i in self.selected]


@dataclass(frozen=True, slots=True)
class OptionInput:
    """Single-select list."""

    options: tuple[str, ...] = ()
    cursor: int = 0

    def update(self, key: str, character: str | None = None) -> OptionInput:
        if not self.options:
            return self
        if key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1))
        if key in ("down", "j"):
            return replace(self, cursor=min(len(self.options) - 1, self.cursor + 1))
        return self

    def value(self) -> str:
        if not self.options:
            return ""
        return self.options[max(0, min(self.cursor, len(self.options) - 1))]


__all__ = [
    "OptionInput",
    "OptionsInput",
    "TextInput",
]

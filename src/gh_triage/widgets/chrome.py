"""Widget chrome: the footer with shortcut key hints."""

from __future__ import annotations

from rich.markup import escape as escape_markup
from textual.widgets import Static

from gh_triage.themes import THEME_COLORS


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


class ContextFooter(Static):
    """Page-sensitive footer showing the keys the reducer acts on."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 1;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]]) -> None:
        """Update the footer with a list of (key, label) binding hints."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        parts = []
        for key, label in bindings:
            safe_key = escape_rich_text(key)
            if key and label:
                parts.append(f"[bold {accent}]{safe_key}[/] [{muted}]{label}[/]")
            elif label:
                parts.append(f"[italic {muted}]{label}[/]")
            else:
                parts.append(f"[italic {muted}]{safe_key}[/]")
        self.update("  ".join(parts))


__all__ = [
    "ContextFooter",
    "escape_rich_text",
]

"""Internal UI constants for the TriageApp."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $th-background;
    color: $th-text;
}

#frame {
    height: 1fr;
    width: 100%;
}
"""

# Every other key is routed through the reducer
APP_BINDINGS: list[BindingType] = [
    Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
]

# Footer shortcut hints per page, as (key, label)
NOTIFICATIONS_SHORTCUTS: list[tuple[str, str]] = [
    ("q", "Quit"),
    ("→", "View"),
    ("↑↓", "Scroll"),
    ("r", "Mark read"),
    ("u", "Unsubscribe"),
    ("U", "Unwatch"),
    ("R", "Refresh"),
    ("/", "Search"),
]

SEARCHING_SHORTCUTS: list[tuple[str, str]] = [
    ("Esc", "Abort"),
    ("Enter", "Save"),
]

NOTIFICATION_SHORTCUTS: list[tuple[str, str]] = [
    ("q", "Quit"),
    ("←", "Back"),
    ("↑↓", "Scroll"),
    ("r", "Mark read"),
    ("u", "Unsubscribe"),
    ("c", "Comment"),
    ("l", "Labels"),
    ("p", "Priority"),
    ("o", "Open"),
    ("R", "Refresh"),
]

LABELS_SHORTCUTS: list[tuple[str, str]] = [
    ("Esc", "Abort"),
    ("Space", "Toggle"),
    ("Enter", "Save"),
]

PRIORITIES_SHORTCUTS: list[tuple[str, str]] = [
    ("Esc", "Abort"),
    ("↑↓", "Select"),
    ("Enter", "Save"),
]

COMMENT_SHORTCUTS: list[tuple[str, str]] = [
    ("Esc", "Abort"),
    ("Enter", "Save"),
]


__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "COMMENT_SHORTCUTS",
    "LABELS_SHORTCUTS",
    "NOTIFICATIONS_SHORTCUTS",
    "NOTIFICATION_SHORTCUTS",
    "PRIORITIES_SHORTCUTS",
    "SEARCHING_SHORTCUTS",
]

"""Color palette and the Textual theme built from it."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

THEME_NAME = "gh-triage"

# Monokai-inspired palette
DEFAULT_THEME = {
    "background": "#272822",
    "panel": "#1e1e1e",
    "panel_alt": "#3e3d32",
    "text": "#f8f8f2",
    "muted": "#75715e",
    "accent": "#66d9ef",
    "accent_alt": "#e6db74",
    "green": "#a6e22e",
    "orange": "#fd971f",
    "pink": "#f92672",
    "purple": "#ae81ff",
    "rule": "#878787",  # xterm 102
}

THEME_COLORS = DEFAULT_THEME.copy()


def _build_textual_theme(name: str, colors: dict[str, str]) -> TextualTheme:
    """Convert an app color dict to a Textual Theme with $th-* CSS variables."""
    variables = {
        "th-background": colors["background"],
        "th-panel": colors["panel"],
        "th-panel-alt": colors["panel_alt"],
        "th-accent": colors["accent"],
        "th-muted": colors["muted"],
        "th-text": colors["text"],
        "th-pink": colors["pink"],
    }
    return TextualTheme(
        name=name,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        warning=colors["orange"],
        error=colors["pink"],
        success=colors["green"],
        dark=True,
        variables=variables,
    )


TEXTUAL_THEME = _build_textual_theme(THEME_NAME, DEFAULT_THEME)


__all__ = [
    "DEFAULT_THEME",
    "TEXTUAL_THEME",
    "THEME_COLORS",
    "THEME_NAME",
]

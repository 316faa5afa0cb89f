"""Markdown-to-terminal rendering for issue bodies and comments."""

from __future__ import annotations

import io
from functools import lru_cache

from rich.console import Console
from rich.emoji import Emoji
from rich.markdown import Markdown
from rich.text import Text

# Narrowest width Markdown is laid out at, so tables and code stay legible
MIN_RENDER_WIDTH = 20


def normalize_markdown(text: str) -> str:
    """Unify line endings, expand tabs, and replace ``:emoji:`` codes."""
    text = text.replace("\r\n", "\n").replace("\t", "  ")
    return Emoji.replace(text)


@lru_cache(maxsize=128)
def render_markdown(text: str, code_theme: str, width: int) -> tuple[Text, ...]:
    """Render Markdown to styled lines ``width`` cells wide.

    ``code_theme`` names the Pygments style used for fenced code blocks.
    Trailing whitespace is stripped from every line; callers must not mutate
    the returned lines since results are cached.
    """
    render_width = max(MIN_RENDER_WIDTH, width)
    console = Console(
        file=io.StringIO(),
        width=render_width,
        force_terminal=True,
        color_system="truecolor",
    )
    markdown = Markdown(normalize_markdown(text), code_theme=code_theme)
    rendered = console.render_lines(markdown, console.options, pad=False)

    lines: list[Text] = []
    for segments in rendered:
        line = Text(end="")
        for segment in segments:
            if segment.control:
                continue
            line.append(segment.text, segment.style)
        line.rstrip()
        lines.append(line)

    while lines and not lines[-1].plain:
        lines.pop()
    return tuple(lines)


__all__ = [
    "MIN_RENDER_WIDTH",
    "normalize_markdown",
    "render_markdown",
]

"""Bounded scrolling windows over rendered lines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def bounded(items: Sequence[T], start: int, stop: int) -> list[T]:
    """Slice ``items`` with both bounds clamped to ``[0, len(items)]``."""
    size = len(items)
    start = max(0, min(start, size))
    stop = max(0, min(stop, size))
    return list(items[start:stop])


def max_scroll(content_height: int, viewport_height: int) -> int:
    """Largest useful scroll offset for content of the given height."""
    return max(0, content_height - viewport_height)


def clamp_scroll(offset: int, content_height: int, viewport_height: int) -> int:
    """Clamp a scroll offset to ``[0, max_scroll]``."""
    return max(0, min(offset, max_scroll(content_height, viewport_height)))


def viewport(lines: Sequence[T], scroll: int, height: int, sticky: int = 0) -> list[T]:
    """Return the visible window of ``lines``.

    The first ``sticky`` lines behave like a header: they are always shown
    and never scrolled. The rest is windowed to
    ``[scroll, scroll + height - sticky)``. The result never has more than
    ``height`` lines and never indexes past either end of the input.
    """
    if height <= 0:
        return []
    sticky = max(0, min(sticky, height, len(lines)))
    scroll = max(0, scroll)
    leading = list(lines[:sticky])
    body = lines[sticky:]
    return leading + bounded(body, scroll, scroll + height - sticky)


__all__ = [
    "bounded",
    "clamp_scroll",
    "max_scroll",
    "viewport",
]

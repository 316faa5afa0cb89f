"""Body widget that displays the rendered frame."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static


class FrameView(Static):
    """Shows the page text produced by ``view.render``.

    The frame is already cut to the terminal height, so the widget never
    scrolls or wraps on its own.
    """

    DEFAULT_CSS = """
    FrameView {
        height: 1fr;
        width: 100%;
        overflow: hidden hidden;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__("", id=id, markup=False)
        self.frame = Text()

    def show(self, frame: Text) -> None:
        """Replace the displayed frame."""
        frame.no_wrap = True
        frame.overflow = "crop"
        self.frame = frame
        self.update(frame)

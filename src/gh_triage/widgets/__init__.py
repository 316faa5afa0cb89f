"""Widget classes for the triage screen."""

from gh_triage.widgets.chrome import ContextFooter
from gh_triage.widgets.frame import FrameView

__all__ = [
    "ContextFooter",
    "FrameView",
]

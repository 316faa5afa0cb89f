"""Application state: the immutable snapshot the reducer replaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gh_triage.inputs import OptionInput, OptionsInput, TextInput
from gh_triage.models import Comment, Issue, Label, Notification


class Page(Enum):
    """The page the user is viewing; selects input routing and rendering."""

    NOTIFICATIONS = "notifications"
    NOTIFICATION = "notification"
    LABELS = "labels"
    PRIORITIES = "priorities"
    COMMENT = "comment"


@dataclass(frozen=True, slots=True)
class Model:
    """Application model.

    Never mutated in place: every reducer step returns a new value built with
    ``dataclasses.replace``.
    """

    page: Page = Page.NOTIFICATIONS

    # notifications page
    notifications: tuple[Notification, ...] = ()
    notifications_scroll: int = 0
    selected: int = 0
    searching: bool = False
    search: TextInput = field(default_factory=TextInput)

    # notification page
    notification: Notification | None = None
    notification_scroll: int = 0
    issue: Issue | None = None
    labels: tuple[Label, ...] = ()
    comments: tuple[Comment, ...] = ()
    loading_issue: bool = False
    loading_labels: bool = False
    loading_comments: bool = False

    # labels page
    repo_labels: tuple[Label, ...] = ()
    label_options: OptionsInput = field(default_factory=OptionsInput)

    # priorities page
    priority_options: OptionInput = field(default_factory=OptionInput)

    # comment page
    comment: TextInput = field(default_factory=TextInput)

    # shared
    marking_as_read: bool = False
    unsubscribing: bool = False
    unwatching: bool = False
    in_flight_id: str | None = None  # notification the running action targets
    loading: bool = False
    width: int = 0
    height: int = 0
    status: str = ""  # last surfaced failure, empty when none

    @property
    def search_text(self) -> str:
        return self.search.value

    @property
    def search_visible(self) -> bool:
        """Whether the "Searching:" line is rendered above the list."""
        return self.searching or bool(self.search.value)

    @property
    def busy(self) -> bool:
        """Whether a destructive action is in flight."""
        return self.marking_as_read or self.unsubscribing or self.unwatching


def initial_model() -> Model:
    """Model at program start: notifications page, loading."""
    return Model(page=Page.NOTIFICATIONS, loading=True)


__all__ = [
    "Model",
    "Page",
    "initial_model",
]

"""Message types consumed by the reducer.

Messages come from two sources: terminal input (``KeyPressed``,
``Resized``) and completed commands (everything else). All are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gh_triage.models import Comment, Issue, Label, Notification

# === Terminal input ===


@dataclass(frozen=True, slots=True)
class KeyPressed:
    """A key press. ``key`` is the key name, ``character`` the printable text."""

    key: str
    character: str | None = None

    @property
    def rune(self) -> str | None:
        """The single printable character, or None for special keys."""
        if self.character and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return None


@dataclass(frozen=True, slots=True)
class GotDimensions:
    """Initial terminal dimensions are known."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Resized:
    """The terminal was resized."""

    width: int
    height: int


# === Command results ===


@dataclass(frozen=True, slots=True)
class NotificationsLoaded:
    notifications: tuple[Notification, ...]


@dataclass(frozen=True, slots=True)
class NotificationIssueLoaded:
    notification_id: str
    issue: Issue


@dataclass(frozen=True, slots=True)
class NotificationLabelsLoaded:
    notification_id: str
    labels: tuple[Label, ...]


@dataclass(frozen=True, slots=True)
class NotificationCommentsLoaded:
    notification_id: str
    comments: tuple[Comment, ...]


@dataclass(frozen=True, slots=True)
class LabelsLoaded:
    """All labels of the notification's repository."""

    notification_id: str
    labels: tuple[Label, ...]


@dataclass(frozen=True, slots=True)
class NotificationLabelsUpdated:
    notification_id: str


@dataclass(frozen=True, slots=True)
class NotificationPriorityUpdated:
    notification_id: str


@dataclass(frozen=True, slots=True)
class CommentAdded:
    notification_id: str


@dataclass(frozen=True, slots=True)
class MarkedAsRead:
    notification: Notification


@dataclass(frozen=True, slots=True)
class Unsubscribed:
    notification: Notification


@dataclass(frozen=True, slots=True)
class Unwatched:
    owner: str
    repo: str


@dataclass(frozen=True, slots=True)
class CommandFailed:
    """A command failed with something other than an absorbed condition.

    ``clears`` names the model flags the command set while it ran.
    ``notification_id`` is set for work issued from a notification's detail
    page; those flags are only cleared while that notification is still on
    screen. List-wide work leaves it ``None``.
    """

    action: str
    error: str
    notification_id: str | None = None
    clears: tuple[str, ...] = ()


Message = Union[
    KeyPressed,
    GotDimensions,
    Resized,
    NotificationsLoaded,
    NotificationIssueLoaded,
    NotificationLabelsLoaded,
    NotificationCommentsLoaded,
    LabelsLoaded,
    NotificationLabelsUpdated,
    NotificationPriorityUpdated,
    CommentAdded,
    MarkedAsRead,
    Unsubscribed,
    Unwatched,
    CommandFailed,
]


__all__ = [
    "CommandFailed",
    "CommentAdded",
    "GotDimensions",
    "KeyPressed",
    "LabelsLoaded",
    "MarkedAsRead",
    "Message",
    "NotificationCommentsLoaded",
    "NotificationIssueLoaded",
    "NotificationLabelsLoaded",
    "NotificationLabelsUpdated",
    "NotificationPriorityUpdated",
    "NotificationsLoaded",
    "Resized",
    "Unsubscribed",
    "Unwatched",
]

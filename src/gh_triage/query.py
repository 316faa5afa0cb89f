"""List pipeline: filtering and scroll positioning for notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from gh_triage.models import Label, Notification, Priority
from gh_triage.viewport import clamp_scroll

# Number of rows a notification consumes in the list
LIST_ITEM_HEIGHT = 4

# Blank rows above and below the list
LIST_PADDING = 2

# Rows taken by the "Searching:" line and its spacer
SEARCH_LINE_HEIGHT = 2


def filter_notifications(notifications: Iterable[Notification], text: str) -> list[Notification]:
    """Keep notifications whose repository full name contains ``text``.

    Matching is a case-sensitive substring test; relative order is preserved.
    An empty ``text`` keeps everything.
    """
    return [n for n in notifications if text in n.repository.full_name]


def sort_notifications(notifications: Iterable[Notification]) -> list[Notification]:
    """Sort by last update, most recent first. Ties keep their incoming order."""
    return sorted(notifications, key=lambda n: n.updated_at, reverse=True)


def visible_notifications(notifications: Iterable[Notification], text: str) -> list[Notification]:
    """Sort then filter: the list exactly as shown on screen."""
    return filter_notifications(sort_notifications(notifications), text)


def list_height(count: int, search_visible: bool = False) -> int:
    """Rendered height of a notification list with ``count`` entries."""
    height = count * LIST_ITEM_HEIGHT + LIST_PADDING
    if search_visible:
        height += SEARCH_LINE_HEIGHT
    return height


def scroll_notifications(
    selected: int,
    count: int,
    height: int,
    direction: int,
    search_visible: bool = False,
) -> int:
    """Return the list scroll offset that keeps ``selected`` in view.

    Near the top of the list (within ``height // 2`` rows) the offset stays 0.
    Moving down (``direction < 0``) past the last full page pins the offset
    to the end; moving up (``direction > 0``) only pins once the selection is
    within half a page of the end. Otherwise the selection is centered.
    The result is always within ``[0, list_height - height]``.
    """
    selected_height = selected * LIST_ITEM_HEIGHT
    total = list_height(count, search_visible)
    padding = height // 2

    if selected_height < padding:
        return 0

    if direction < 0 and selected_height > total - height:
        offset = total - height
    elif direction > 0 and selected_height > total - padding:
        offset = total - height
    else:
        offset = selected_height - padding

    return clamp_scroll(offset, total, height)


def clamp_selected(selected: int, count: int) -> int:
    """Clamp a selection index to ``[0, count - 1]`` (0 for empty lists)."""
    if count <= 0:
        return 0
    return max(0, min(selected, count - 1))


def remove_notification(
    notifications: Sequence[Notification], notification_id: str
) -> tuple[Notification, ...]:
    """Remove a notification by id. Absent ids leave the list unchanged."""
    return tuple(n for n in notifications if n.id != notification_id)


def notifications_by_repo(
    notifications: Iterable[Notification], owner: str, repo: str
) -> list[Notification]:
    """Return notifications belonging to ``owner/repo``."""
    return [
        n for n in notifications if n.repository.owner == owner and n.repository.name == repo
    ]


def filter_priority_labels(
    labels: Iterable[Label], priorities: Iterable[Priority]
) -> list[Label]:
    """Drop labels whose name is a configured priority label."""
    priority_labels = {p.label for p in priorities}
    return [label for label in labels if label.name not in priority_labels]


def label_names(labels: Iterable[Label]) -> list[str]:
    return [label.name for label in labels]


def labels_selected(labels: Sequence[Label], assigned: Iterable[Label]) -> frozenset[int]:
    """Indexes into ``labels`` of the labels present in ``assigned``."""
    assigned_ids = {label.id for label in assigned}
    return frozenset(i for i, label in enumerate(labels) if label.id in assigned_ids)


def find_priority(priorities: Iterable[Priority], name: str) -> Priority | None:
    """Look up a configured priority by its name."""
    for priority in priorities:
        if priority.name == name:
            return priority
    return None


__all__ = [
    "LIST_ITEM_HEIGHT",
    "LIST_PADDING",
    "SEARCH_LINE_HEIGHT",
    "clamp_selected",
    "filter_notifications",
    "filter_priority_labels",
    "find_priority",
    "label_names",
    "labels_selected",
    "list_height",
    "notifications_by_repo",
    "remove_notification",
    "scroll_notifications",
    "sort_notifications",
    "visible_notifications",
]

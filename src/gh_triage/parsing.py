"""GitHub REST payload parsing and timestamp helpers."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from gh_triage.models import Comment, Issue, Label, Notification, Repository, Subject, User

logger = logging.getLogger(__name__)

# Sentinel for missing or malformed timestamps (sorts last when descending)
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_TIME_UNITS: tuple[tuple[int, str], ...] = (
    (365 * 24 * 3600, "year"),
    (30 * 24 * 3600, "month"),
    (7 * 24 * 3600, "week"),
    (24 * 3600, "day"),
    (3600, "hour"),
    (60, "minute"),
)


def parse_timestamp(value: Any) -> datetime:
    """Parse a GitHub ISO-8601 timestamp like "2024-01-15T10:00:00Z".

    Returns:
        Timezone-aware datetime, or EPOCH for missing/malformed values.
    """
    if not isinstance(value, str) or not value.strip():
        return EPOCH
    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        logger.debug("Malformed timestamp %r", value)
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_relative_time(when: datetime, now: datetime | None = None) -> str:
    """Format a timestamp relative to now, e.g. "3 hours ago"."""
    now = now or datetime.now(UTC)
    seconds = int((now - when).total_seconds())
    suffix = "ago"
    if seconds < 0:
        seconds = -seconds
        suffix = "from now"
    if seconds < 60:
        return "now"
    for unit_seconds, unit in _TIME_UNITS:
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            return f"{count} {unit}{'s' if count != 1 else ''} {suffix}"
    return "now"


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _dict(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def parse_user(data: dict[str, Any]) -> User:
    return User(login=_str(data, "login"))


def parse_repository(data: dict[str, Any]) -> Repository:
    owner = _str(_dict(data, "owner"), "login")
    name = _str(data, "name")
    full_name = _str(data, "full_name") or (f"{owner}/{name}" if owner and name else name)
    return Repository(full_name=full_name, name=name, owner=owner)


def parse_notification(data: dict[str, Any]) -> Notification:
    """Parse a notification thread object."""
    subject = _dict(data, "subject")
    return Notification(
        id=str(data.get("id", "")),
        reason=_str(data, "reason"),
        updated_at=parse_timestamp(data.get("updated_at")),
        repository=parse_repository(_dict(data, "repository")),
        subject=Subject(
            title=_str(subject, "title"),
            url=_str(subject, "url"),
            type=_str(subject, "type"),
            latest_comment_url=_str(subject, "latest_comment_url"),
        ),
        unread=bool(data.get("unread", True)),
    )


def parse_issue(data: dict[str, Any]) -> Issue:
    """Parse an issue or pull request object."""
    number = data.get("number")
    return Issue(
        number=number if isinstance(number, int) else 0,
        title=_str(data, "title"),
        body=_str(data, "body"),
        user=parse_user(_dict(data, "user")),
        created_at=parse_timestamp(data.get("created_at")),
        html_url=_str(data, "html_url"),
        comments_url=_str(data, "comments_url"),
        state=_str(data, "state") or "open",
    )


def parse_label(data: dict[str, Any]) -> Label:
    label_id = data.get("id")
    return Label(
        id=label_id if isinstance(label_id, int) else 0,
        name=_str(data, "name"),
        color=_str(data, "color").lstrip("#"),
        description=_str(data, "description"),
    )


def parse_comment(data: dict[str, Any]) -> Comment:
    comment_id = data.get("id")
    return Comment(
        id=comment_id if isinstance(comment_id, int) else 0,
        body=_str(data, "body"),
        user=parse_user(_dict(data, "user")),
        created_at=parse_timestamp(data.get("created_at")),
    )


def parse_list(payload: Any, parser: Any, label: str) -> list:
    """Parse a JSON array with ``parser``, skipping non-object entries."""
    if not isinstance(payload, list):
        logger.warning("%s returned non-list payload", label)
        return []
    return [parser(item) for item in payload if isinstance(item, dict)]


__all__ = [
    "EPOCH",
    "format_relative_time",
    "parse_comment",
    "parse_issue",
    "parse_label",
    "parse_list",
    "parse_notification",
    "parse_repository",
    "parse_timestamp",
    "parse_user",
]

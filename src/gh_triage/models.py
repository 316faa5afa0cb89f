"""Data models and constants for the notification triage application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Application identity for platformdirs config paths
CONFIG_APP_NAME = "gh-triage"

# GitHub API constants
GITHUB_API_URL = "https://api.github.com"
NOTIFICATIONS_PER_PAGE = 100

# Command deadlines, measured from dispatch
READ_TIMEOUT_SECONDS = 5.0
WRITE_TIMEOUT_SECONDS = 10.0

# Subject types never shown in the list
IGNORED_SUBJECT_TYPES = frozenset({"Release"})

# Pygments style used for fenced code blocks in issue bodies
DEFAULT_CODE_THEME = "monokai"


@dataclass(frozen=True, slots=True)
class User:
    """A GitHub account."""

    login: str


@dataclass(frozen=True, slots=True)
class Repository:
    """Repository a notification belongs to."""

    full_name: str
    name: str
    owner: str  # owner login


@dataclass(frozen=True, slots=True)
class Subject:
    """The thing a notification is about (issue, pull request, ...)."""

    title: str
    url: str
    type: str
    latest_comment_url: str = ""


@dataclass(frozen=True, slots=True)
class Notification:
    """A pending notification thread."""

    id: str
    reason: str
    updated_at: datetime
    repository: Repository
    subject: Subject
    unread: bool = True


@dataclass(frozen=True, slots=True)
class Issue:
    """Issue (or pull request) referenced by a notification."""

    number: int
    title: str
    body: str
    user: User
    created_at: datetime
    html_url: str
    comments_url: str
    state: str = "open"


@dataclass(frozen=True, slots=True)
class Label:
    """Repository or issue label."""

    id: int
    name: str
    color: str  # hex without leading '#'
    description: str = ""


@dataclass(frozen=True, slots=True)
class Comment:
    """Issue comment."""

    id: int
    body: str
    user: User
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Priority:
    """User-configured priority tier mapped to a label."""

    name: str
    label: str
    color: str


DEFAULT_PRIORITIES: tuple[Priority, ...] = (
    Priority(name="Low", label="Priority: Low", color="#532BE3"),
    Priority(name="Medium", label="Priority: Medium", color="#532BE3"),
    Priority(name="High", label="Priority: High", color="#532BE3"),
)


@dataclass(frozen=True, slots=True)
class UserConfig:
    """Read-only user configuration, loaded once at startup."""

    priorities: tuple[Priority, ...] = DEFAULT_PRIORITIES
    code_theme: str = DEFAULT_CODE_THEME


__all__ = [
    "CONFIG_APP_NAME",
    "DEFAULT_CODE_THEME",
    "DEFAULT_PRIORITIES",
    "GITHUB_API_URL",
    "IGNORED_SUBJECT_TYPES",
    "NOTIFICATIONS_PER_PAGE",
    "READ_TIMEOUT_SECONDS",
    "WRITE_TIMEOUT_SECONDS",
    "Comment",
    "Issue",
    "Label",
    "Notification",
    "Priority",
    "Repository",
    "Subject",
    "User",
    "UserConfig",
]

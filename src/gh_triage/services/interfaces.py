"""Service interfaces + the execution context threaded through commands."""

from __future__ import annotations

import webbrowser
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import httpx

from gh_triage.models import Comment, Issue, Label, Notification, UserConfig
from gh_triage.services.github_api import GitHubClient


@runtime_checkable
class GitHubApi(Protocol):
    """Interface for the GitHub operations commands depend on."""

    async def list_notifications(self, *, per_page: int) -> list[Notification]:
        """Fetch the first page of notifications."""
        ...

    async def get_issue(self, url: str) -> Issue:
        """Fetch an issue by API URL."""
        ...

    async def list_issue_labels(self, owner: str, repo: str, number: int) -> list[Label]:
        """List labels assigned to an issue."""
        ...

    async def list_repo_labels(self, owner: str, repo: str) -> list[Label]:
        """List every label defined on a repository."""
        ...

    async def list_comments(self, url: str) -> list[Comment]:
        """List comments from an issue comments URL."""
        ...

    async def replace_issue_labels(
        self, owner: str, repo: str, number: int, names: list[str]
    ) -> None:
        """Replace an issue's labels with a non-empty set."""
        ...

    async def remove_issue_labels(self, owner: str, repo: str, number: int) -> None:
        """Remove all labels from an issue."""
        ...

    async def remove_issue_label(self, owner: str, repo: str, number: int, name: str) -> None:
        """Remove one label from an issue."""
        ...

    async def add_issue_labels(self, owner: str, repo: str, number: int, names: list[str]) -> None:
        """Add labels to an issue."""
        ...

    async def create_label(
        self, owner: str, repo: str, *, name: str, color: str, description: str = ""
    ) -> None:
        """Create a repository label."""
        ...

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        """Add a comment to an issue."""
        ...

    async def mark_thread_read(self, thread_id: str) -> None:
        """Mark a notification thread as read."""
        ...

    async def delete_thread_subscription(self, thread_id: str) -> None:
        """Unsubscribe from a notification thread."""
        ...

    async def delete_repo_subscription(self, owner: str, repo: str) -> None:
        """Stop watching a repository."""
        ...


@runtime_checkable
class Terminal(Protocol):
    """Interface for the terminal device the app renders into."""

    def size(self) -> tuple[int, int]:
        """Current (width, height)."""
        ...

    async def wait_for_resize(self) -> None:
        """Block until the terminal is resized."""
        ...


class StaticTerminal:
    """Terminal with a fixed size, for headless use and tests."""

    def __init__(self, width: int = 80, height: int = 24) -> None:
        self.width = width
        self.height = height

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    async def wait_for_resize(self) -> None:
        return None


@dataclass(slots=True)
class AppContext:
    """Process-wide collaborators shared read-only by the reducer and commands."""

    github: GitHubApi
    config: UserConfig
    terminal: Terminal = field(default_factory=StaticTerminal)
    open_url: Callable[[str], object] = webbrowser.open


def build_app_context(
    token: str,
    config: UserConfig,
    *,
    terminal: Terminal | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AppContext:
    """Build the default context backed by the httpx GitHub client."""
    return AppContext(
        github=GitHubClient(token, client=http_client),
        config=config,
        terminal=terminal or StaticTerminal(),
    )


__all__ = [
    "AppContext",
    "GitHubApi",
    "StaticTerminal",
    "Terminal",
    "build_app_context",
]

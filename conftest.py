"""Shared test fixtures for gh-triage tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from gh_triage.markdown import render_markdown
from gh_triage.models import (
    Comment,
    Issue,
    Label,
    Notification,
    Repository,
    Subject,
    User,
    UserConfig,
)
from gh_triage.services.github_api import GitHubError
from gh_triage.services.interfaces import AppContext, StaticTerminal
from gh_triage.themes import DEFAULT_THEME, THEME_COLORS

# Fixed clock for rendering tests
NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Restore THEME_COLORS and clear the Markdown render cache after each test."""
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DEFAULT_THEME)
    render_markdown.cache_clear()


# ── Fake GitHub API ──────────────────────────────────────────────────────────


class FakeGitHub:
    """In-memory stand-in for ``GitHubClient`` that records every call.

    Set ``errors[method_name]`` to make a method raise, and ``delay`` to make
    every call sleep first.
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.issues: dict[str, Issue] = {}
        self.issue_labels: dict[int, list[Label]] = {}
        self.repo_labels: list[Label] = []
        self.comments: dict[str, list[Comment]] = {}
        self.read_threads: list[str] = []
        self.unsubscribed_threads: list[str] = []
        self.unwatched: list[tuple[str, str]] = []
        self.created_comments: list[tuple[int, str]] = []
        self.created_labels: list[dict[str, str]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.errors: dict[str, BaseException] = {}
        self.delay = 0.0
        self._next_label_id = 1000

    async def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if name in self.errors:
            raise self.errors[name]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _repo_label(self, name: str) -> Label:
        for label in self.repo_labels:
            if label.name == name:
                return label
        self._next_label_id += 1
        label = Label(id=self._next_label_id, name=name, color="ededed")
        self.repo_labels.append(label)
        return label

    async def list_notifications(self, *, per_page: int) -> list[Notification]:
        await self._call("list_notifications", per_page)
        return list(self.notifications[:per_page])

    async def get_issue(self, url: str) -> Issue:
        await self._call("get_issue", url)
        if url not in self.issues:
            raise GitHubError(404, "Not Found")
        return self.issues[url]

    async def list_issue_labels(self, owner: str, repo: str, number: int) -> list[Label]:
        await self._call("list_issue_labels", owner, repo, number)
        return list(self.issue_labels.get(number, []))

    async def list_repo_labels(self, owner: str, repo: str) -> list[Label]:
        await self._call("list_repo_labels", owner, repo)
        return list(self.repo_labels)

    async def list_comments(self, url: str) -> list[Comment]:
        await self._call("list_comments", url)
        return list(self.comments.get(url, []))

    async def replace_issue_labels(
        self, owner: str, repo: str, number: int, names: list[str]
    ) -> None:
        await self._call("replace_issue_labels", owner, repo, number, list(names))
        self.issue_labels[number] = [self._repo_label(name) for name in names]

    async def remove_issue_labels(self, owner: str, repo: str, number: int) -> None:
        await self._call("remove_issue_labels", owner, repo, number)
        self.issue_labels[number] = []

    async def remove_issue_label(self, owner: str, repo: str, number: int, name: str) -> None:
        await self._call("remove_issue_label", owner, repo, number, name)
        assigned = self.issue_labels.get(number, [])
        if not any(label.name == name for label in assigned):
            raise GitHubError(404, "Label does not exist")
        self.issue_labels[number] = [label for label in assigned if label.name != name]

    async def add_issue_labels(self, owner: str, repo: str, number: int, names: list[str]) -> None:
        await self._call("add_issue_labels", owner, repo, number, list(names))
        assigned = self.issue_labels.setdefault(number, [])
        for name in names:
            if not any(label.name == name for label in assigned):
                assigned.append(self._repo_label(name))

    async def create_label(
        self, owner: str, repo: str, *, name: str, color: str, description: str = ""
    ) -> None:
        await self._call("create_label", owner, repo, name)
        if any(label.name == name for label in self.repo_labels):
            raise GitHubError(422, "Validation Failed", ("already_exists",))
        self.created_labels.append({"name": name, "color": color, "description": description})
        self._next_label_id += 1
        self.repo_labels.append(
            Label(id=self._next_label_id, name=name, color=color, description=description)
        )

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        await self._call("create_comment", owner, repo, number, body)
        self.created_comments.append((number, body))

    async def mark_thread_read(self, thread_id: str) -> None:
        await self._call("mark_thread_read", thread_id)
        self.read_threads.append(thread_id)

    async def delete_thread_subscription(self, thread_id: str) -> None:
        await self._call("delete_thread_subscription", thread_id)
        self.unsubscribed_threads.append(thread_id)

    async def delete_repo_subscription(self, owner: str, repo: str) -> None:
        await self._call("delete_repo_subscription", owner, repo)
        self.unwatched.append((owner, repo))


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_notification():
    """Factory fixture for creating Notification instances with sensible defaults."""

    def _make(
        id: str = "1",
        repo: str = "tj/triage",
        title: str = "Something is broken",
        reason: str = "mention",
        updated_at: datetime | None = None,
        subject_type: str = "Issue",
        number: int = 1,
        url: str | None = None,
    ) -> Notification:
        owner, _, name = repo.partition("/")
        if updated_at is None:
            updated_at = NOW - timedelta(hours=int(id) if id.isdigit() else 1)
        if url is None:
            url = f"https://api.github.com/repos/{repo}/issues/{number}"
        return Notification(
            id=id,
            reason=reason,
            updated_at=updated_at,
            repository=Repository(full_name=repo, name=name, owner=owner),
            subject=Subject(title=title, url=url, type=subject_type),
        )

    return _make


@pytest.fixture
def make_issue():
    """Factory fixture for creating Issue instances."""

    def _make(
        number: int = 1,
        repo: str = "tj/triage",
        title: str = "Something is broken",
        body: str = "It does not work.",
        login: str = "octocat",
        created_at: datetime | None = None,
    ) -> Issue:
        api = f"https://api.github.com/repos/{repo}/issues/{number}"
        return Issue(
            number=number,
            title=title,
            body=body,
            user=User(login=login),
            created_at=created_at or NOW - timedelta(days=2),
            html_url=f"https://github.com/{repo}/issues/{number}",
            comments_url=f"{api}/comments",
        )

    return _make


@pytest.fixture
def make_label():
    def _make(id: int = 1, name: str = "bug", color: str = "d73a4a") -> Label:
        return Label(id=id, name=name, color=color)

    return _make


@pytest.fixture
def make_comment():
    def _make(
        id: int = 1,
        body: str = "Same here.",
        login: str = "hubot",
        created_at: datetime | None = None,
    ) -> Comment:
        return Comment(
            id=id,
            body=body,
            user=User(login=login),
            created_at=created_at or NOW - timedelta(hours=3),
        )

    return _make


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def opened_urls() -> list[str]:
    return []


@pytest.fixture
def make_context(fake_github, opened_urls):
    """Factory fixture for an AppContext wired to the fake GitHub API."""

    def _make(
        config: UserConfig | None = None,
        terminal: Any = None,
        github: Any = None,
    ) -> AppContext:
        return AppContext(
            github=github or fake_github,
            config=config or UserConfig(),
            terminal=terminal or StaticTerminal(100, 40),
            open_url=opened_urls.append,
        )

    return _make


@pytest.fixture
def ctx(make_context) -> AppContext:
    return make_context()


@pytest.fixture
def now() -> datetime:
    """The fixed clock factory timestamps are relative to."""
    return NOW

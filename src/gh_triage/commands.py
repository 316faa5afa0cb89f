"""Asynchronous units of work returned by the reducer.

A ``Command`` pairs a name (for logs and tests) with a coroutine function
taking the ``AppContext``. Running it yields exactly one message, or ``None``
when there is nothing for the reducer to learn. Commands never touch the
model.

Each network-bound command runs under an ``asyncio.timeout`` deadline:
``READ_TIMEOUT_SECONDS`` for fetches, ``WRITE_TIMEOUT_SECONDS`` for writes
and deletes. Not-found replies to idempotent removals and already-exists
replies to label creation count as success. Everything else is turned into
``CommandFailed``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from gh_triage.messages import (
    CommandFailed,
    CommentAdded,
    GotDimensions,
    LabelsLoaded,
    MarkedAsRead,
    Message,
    NotificationCommentsLoaded,
    NotificationIssueLoaded,
    NotificationLabelsLoaded,
    NotificationLabelsUpdated,
    NotificationPriorityUpdated,
    NotificationsLoaded,
    Unsubscribed,
    Unwatched,
)
from gh_triage.models import (
    IGNORED_SUBJECT_TYPES,
    NOTIFICATIONS_PER_PAGE,
    READ_TIMEOUT_SECONDS,
    WRITE_TIMEOUT_SECONDS,
    Issue,
    Notification,
)
from gh_triage.query import find_priority
from gh_triage.services.github_api import GitHubError
from gh_triage.services.interfaces import AppContext

logger = logging.getLogger(__name__)

CommandFn = Callable[[AppContext], Awaitable["Message | None"]]

# Failures a command reports instead of raising
COMMAND_ERRORS = (GitHubError, httpx.HTTPError, TimeoutError)


@dataclass(frozen=True, slots=True)
class Command:
    """A pending unit of asynchronous work."""

    name: str
    run: CommandFn

    def __call__(self, ctx: AppContext) -> Awaitable[Message | None]:
        return self.run(ctx)


async def _no_message(ctx: AppContext) -> None:
    return None


# Sentinel: the event loop exits when the reducer returns this command
QUIT = Command("quit", _no_message)


def describe_error(exc: BaseException) -> str:
    """Short human-readable description of a command failure."""
    if isinstance(exc, TimeoutError):
        return "request timed out"
    if isinstance(exc, GitHubError):
        return str(exc)
    if isinstance(exc, httpx.HTTPError):
        return f"network error: {exc}" if str(exc) else f"network error: {type(exc).__name__}"
    return str(exc) or type(exc).__name__


async def _guarded(
    action: str,
    seconds: float,
    work: Callable[[], Awaitable[Message | None]],
    *,
    notification_id: str | None = None,
    clears: tuple[str, ...] = (),
) -> Message | None:
    """Run ``work`` under a deadline, translating failures to ``CommandFailed``.

    ``notification_id`` and ``clears`` are copied onto the failure so the
    reducer can release exactly the flags this command owns.
    """
    logger.debug("Dispatching %s", action)
    try:
        async with asyncio.timeout(seconds):
            return await work()
    except COMMAND_ERRORS as exc:
        logger.warning("Could not %s: %s", action, exc)
        return CommandFailed(
            action=action,
            error=describe_error(exc),
            notification_id=notification_id,
            clears=clears,
        )


async def _absorb(
    call: Awaitable[None],
    *,
    action: str,
    not_found: bool = False,
    already_exists: bool = False,
) -> None:
    """Await ``call``, treating the named GitHub conditions as success."""
    try:
        await call
    except GitHubError as exc:
        if (not_found and exc.not_found) or (already_exists and exc.already_exists):
            logger.debug("Ignoring %s during %s", exc, action)
            return
        raise


def _split_repo(notification: Notification) -> tuple[str, str]:
    return notification.repository.owner, notification.repository.name


# -- terminal ----------------------------------------------------------------


def get_dimensions() -> Command:
    """Query the terminal size.

    Some ptys (Docker and friends) start out as 0x0; in that case wait for the
    first resize and ask again.
    """

    async def run(ctx: AppContext) -> Message | None:
        width, height = ctx.terminal.size()
        while width == 0 and height == 0:
            logger.debug("Terminal reports 0x0, waiting for resize")
            await ctx.terminal.wait_for_resize()
            width, height = ctx.terminal.size()
        return GotDimensions(width=width, height=height)

    return Command("get_dimensions", run)


# -- reads -------------------------------------------------------------------


def load_notifications() -> Command:
    """Fetch the first page of notifications, dropping release notices."""

    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            notifications = await ctx.github.list_notifications(per_page=NOTIFICATIONS_PER_PAGE)
            kept = tuple(n for n in notifications if n.subject.type not in IGNORED_SUBJECT_TYPES)
            logger.debug("Loaded %d notifications (%d kept)", len(notifications), len(kept))
            return NotificationsLoaded(notifications=kept)

        return await _guarded(
            "load notifications", READ_TIMEOUT_SECONDS, work, clears=("loading",)
        )

    return Command("load_notifications", run)


def load_notification_issue(notification: Notification) -> Command:
    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            issue = await ctx.github.get_issue(notification.subject.url)
            return NotificationIssueLoaded(notification_id=notification.id, issue=issue)

        return await _guarded(
            "load issue",
            READ_TIMEOUT_SECONDS,
            work,
            notification_id=notification.id,
            clears=("loading_issue", "loading_labels", "loading_comments"),
        )

    return Command("load_notification_issue", run)


def load_notification_labels(notification: Notification, issue: Issue) -> Command:
    """Fetch the labels currently assigned to the notification's issue."""

    async def run(ctx: AppContext) -> Message | None:
        owner, repo = _split_repo(notification)

        async def work() -> Message:
            labels = await ctx.github.list_issue_labels(owner, repo, issue.number)
            return NotificationLabelsLoaded(notification_id=notification.id, labels=tuple(labels))

        return await _guarded(
            "load issue labels",
            READ_TIMEOUT_SECONDS,
            work,
            notification_id=notification.id,
            clears=("loading_labels",),
        )

    return Command("load_notification_labels", run)


def load_notification_comments(notification: Notification, issue: Issue) -> Command:
    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            comments = await ctx.github.list_comments(issue.comments_url)
            return NotificationCommentsLoaded(
                notification_id=notification.id, comments=tuple(comments)
            )

        return await _guarded(
            "load comments",
            READ_TIMEOUT_SECONDS,
            work,
            notification_id=notification.id,
            clears=("loading_comments",),
        )

    return Command("load_notification_comments", run)


def load_repo_labels(notification: Notification) -> Command:
    """Fetch every label defined on the notification's repository."""

    async def run(ctx: AppContext) -> Message | None:
        owner, repo = _split_repo(notification)

        async def work() -> Message:
            labels = await ctx.github.list_repo_labels(owner, repo)
            return LabelsLoaded(notification_id=notification.id, labels=tuple(labels))

        return await _guarded(
            "load repository labels",
            READ_TIMEOUT_SECONDS,
            work,
            notification_id=notification.id,
            clears=("loading", "loading_labels"),
        )

    return Command("load_repo_labels", run)


# -- writes ------------------------------------------------------------------


def update_notification_labels(
    notification: Notification, issue: Issue, names: list[str]
) -> Command:
    """Set the issue's labels to exactly ``names``.

    GitHub rejects replacing with an empty list, so clearing uses the
    remove-all endpoint instead.
    """
    names = list(names)

    async def run(ctx: AppContext) -> Message | None:
        owner, repo = _split_repo(notification)

        async def work() -> Message:
            if not names:
                await _absorb(
                    ctx.github.remove_issue_labels(owner, repo, issue.number),
                    action="remove labels",
                    not_found=True,
                )
            else:
                await ctx.github.replace_issue_labels(owner, repo, issue.number, names)
            return NotificationLabelsUpdated(notification_id=notification.id)

        return await _guarded(
            "update labels", WRITE_TIMEOUT_SECONDS, work, notification_id=notification.id
        )

    return Command("update_notification_labels", run)


def update_notification_priority(notification: Notification, issue: Issue, name: str) -> Command:
    """Assign the configured priority ``name`` to the issue.

    Ensures the priority label exists, strips every other priority label from
    the issue, then adds the chosen one.
    """

    async def run(ctx: AppContext) -> Message | None:
        owner, repo = _split_repo(notification)
        priorities = ctx.config.priorities
        priority = find_priority(priorities, name)
        if priority is None:
            logger.warning("Unknown priority %r; leaving labels unchanged", name)
            return None

        async def work() -> Message:
            await _absorb(
                ctx.github.create_label(
                    owner,
                    repo,
                    name=priority.label,
                    color=priority.color.lstrip("#"),
                    description=f"{priority.name} priority issue.",
                ),
                action="create priority label",
                already_exists=True,
            )
            for other in priorities:
                if other.label == priority.label:
                    continue
                await _absorb(
                    ctx.github.remove_issue_label(owner, repo, issue.number, other.label),
                    action="remove priority label",
                    not_found=True,
                )
            await ctx.github.add_issue_labels(owner, repo, issue.number, [priority.label])
            return NotificationPriorityUpdated(notification_id=notification.id)

        return await _guarded(
            "update priority", WRITE_TIMEOUT_SECONDS, work, notification_id=notification.id
        )

    return Command("update_notification_priority", run)


def add_comment(notification: Notification, issue: Issue, body: str) -> Command:
    async def run(ctx: AppContext) -> Message | None:
        owner, repo = _split_repo(notification)

        async def work() -> Message:
            await ctx.github.create_comment(owner, repo, issue.number, body)
            return CommentAdded(notification_id=notification.id)

        return await _guarded(
            "add comment", WRITE_TIMEOUT_SECONDS, work, notification_id=notification.id
        )

    return Command("add_comment", run)


def mark_as_read(notification: Notification) -> Command:
    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            await _absorb(
                ctx.github.mark_thread_read(notification.id),
                action="mark as read",
                not_found=True,
            )
            return MarkedAsRead(notification=notification)

        return await _guarded(
            "mark as read", WRITE_TIMEOUT_SECONDS, work, clears=("marking_as_read",)
        )

    return Command("mark_as_read", run)


def unsubscribe(notification: Notification) -> Command:
    """Unsubscribe from the thread, then mark it read."""

    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            await _absorb(
                ctx.github.delete_thread_subscription(notification.id),
                action="unsubscribe",
                not_found=True,
            )
            await _absorb(
                ctx.github.mark_thread_read(notification.id),
                action="mark as read",
                not_found=True,
            )
            return Unsubscribed(notification=notification)

        return await _guarded(
            "unsubscribe", WRITE_TIMEOUT_SECONDS, work, clears=("unsubscribing",)
        )

    return Command("unsubscribe", run)


def unwatch(owner: str, repo: str) -> Command:
    """Stop watching ``owner/repo``."""

    async def run(ctx: AppContext) -> Message | None:
        async def work() -> Message:
            await _absorb(
                ctx.github.delete_repo_subscription(owner, repo),
                action="unwatch",
                not_found=True,
            )
            return Unwatched(owner=owner, repo=repo)

        return await _guarded(
            f"unwatch {owner}/{repo}", WRITE_TIMEOUT_SECONDS, work, clears=("unwatching",)
        )

    return Command("unwatch", run)


def open_in_browser(notification: Notification) -> Command:
    """Resolve the subject's web URL and open it. Yields no message on success."""

    async def run(ctx: AppContext) -> Message | None:
        async def work() -> None:
            issue = await ctx.github.get_issue(notification.subject.url)
            logger.debug("Opening %s", issue.html_url)
            await asyncio.to_thread(ctx.open_url, issue.html_url)
            return None

        return await _guarded("open in browser", READ_TIMEOUT_SECONDS, work)

    return Command("open_in_browser", run)


__all__ = [
    "COMMAND_ERRORS",
    "QUIT",
    "Command",
    "add_comment",
    "describe_error",
    "get_dimensions",
    "load_notification_comments",
    "load_notification_issue",
    "load_notification_labels",
    "load_notifications",
    "load_repo_labels",
    "mark_as_read",
    "open_in_browser",
    "unsubscribe",
    "unwatch",
    "update_notification_labels",
    "update_notification_priority",
]

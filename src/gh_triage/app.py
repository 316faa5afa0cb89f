"""GitHub notification triage TUI.

Usage:
    gh-triage                 # Triage notifications for $GITHUB_TOKEN
    gh-triage --debug         # Log to ~/.config/gh-triage/debug.log

Notifications list:
    up/down - Move selection
    enter/→ - View notification
    r       - Mark read (also backspace)
    u       - Unsubscribe
    U       - Unwatch repository and mark its notifications read
    o       - Open in browser
    R       - Refresh
    /       - Filter by repository
    q       - Quit

Notification view:
    ←       - Back to list
    up/down - Scroll
    c       - Comment
    l       - Edit labels
    p       - Set priority
    o, r, u, R as above
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from textual.app import App, ComposeResult
from textual.css.query import NoMatches
from textual.events import Key, Resize

from gh_triage.commands import QUIT, Command, get_dimensions
from gh_triage.messages import KeyPressed, Message, Resized
from gh_triage.models import UserConfig
from gh_triage.services.interfaces import AppContext, build_app_context
from gh_triage.state import Model, initial_model
from gh_triage.themes import TEXTUAL_THEME, THEME_NAME
from gh_triage.ui_constants import APP_BINDINGS, APP_CSS
from gh_triage.update import update
from gh_triage.view import render, shortcuts
from gh_triage.widgets import ContextFooter, FrameView

logger = logging.getLogger(__name__)

# Seconds to wait for cancelled commands during shutdown
SHUTDOWN_GRACE_SECONDS = 0.5


class ScreenTerminal:
    """``Terminal`` backed by the running Textual app."""

    def __init__(self, app: App) -> None:
        self._app = app
        self._resized = asyncio.Event()

    def size(self) -> tuple[int, int]:
        size = self._app.size
        return size.width, size.height

    def notify_resized(self) -> None:
        self._resized.set()

    async def wait_for_resize(self) -> None:
        self._resized.clear()
        await self._resized.wait()


class TriageApp(App):
    """A TUI application to triage GitHub notifications.

    Key and resize events are turned into messages on a single queue. One
    consumer task feeds them to the reducer, swaps in the new model, re-renders
    and starts the returned commands as background tasks whose results go back
    on the same queue.
    """

    TITLE = "gh-triage"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        *,
        token: str = "",
        context: AppContext | None = None,
    ) -> None:
        super().__init__()
        # Register before compose so $th-* CSS variables resolve
        self.register_theme(TEXTUAL_THEME)
        self.theme = THEME_NAME
        self._config = config or UserConfig()
        self._token = token
        self._app_context = context
        self._terminal = ScreenTerminal(self)
        self._http_client: httpx.AsyncClient | None = None
        self._queue: asyncio.Queue[Message] | None = None
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self.model: Model = initial_model()

    @property
    def context(self) -> AppContext:
        if self._app_context is None:
            raise RuntimeError("TriageApp context is created on mount")
        return self._app_context

    def compose(self) -> ComposeResult:
        yield FrameView(id="frame")
        yield ContextFooter()

    def on_mount(self) -> None:
        """Create the shared HTTP client, start the message loop, query the terminal size."""
        self._queue = asyncio.Queue()
        if self._app_context is None:
            # Shared HTTP client for connection pooling
            self._http_client = httpx.AsyncClient()
            self._app_context = build_app_context(
                self._token,
                self._config,
                terminal=self._terminal,
                http_client=self._http_client,
            )
        self._render_model()
        self._track_task(self._consume_messages())
        self._dispatch(get_dimensions())

    async def on_unmount(self) -> None:
        """Cancel in-flight commands and close the shared HTTP client."""
        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=SHUTDOWN_GRACE_SECONDS)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    def on_key(self, event: Key) -> None:
        """Route every key press through the reducer."""
        event.prevent_default()
        event.stop()
        self.post(KeyPressed(key=event.key, character=event.character))

    def on_resize(self, event: Resize) -> None:
        self._terminal.notify_resized()
        self.post(Resized(width=event.size.width, height=event.size.height))

    def post(self, msg: Message) -> None:
        """Enqueue a message for the reducer."""
        if self._queue is None:
            logger.debug("Dropping %r received before mount", msg)
            return
        self._queue.put_nowait(msg)

    # -- message loop ----------------------------------------------------------

    async def _consume_messages(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            msg = await queue.get()
            self.handle(msg)

    def handle(self, msg: Message) -> None:
        """Run one reducer step and start the commands it returns."""
        model, cmds = update(self.context, msg, self.model)
        self.model = model
        self._render_model()
        for cmd in cmds:
            if cmd is QUIT:
                logger.debug("Quit requested")
                self.exit()
                return
            self._dispatch(cmd)

    def _dispatch(self, cmd: Command) -> None:
        logger.debug("Running command %s", cmd.name)
        self._track_task(self._run_command(cmd))

    async def _run_command(self, cmd: Command) -> None:
        msg = await cmd.run(self.context)
        if msg is not None:
            self.post(msg)

    def _render_model(self) -> None:
        try:
            frame = self.query_one(FrameView)
            footer = self.query_one(ContextFooter)
        except NoMatches:
            return
        frame.show(render(self.context, self.model))
        footer.render_bindings(shortcuts(self.model))

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)


__all__ = [
    "ScreenTerminal",
    "TriageApp",
]
